"""
Source-checkout runner.

Equivalent to `python -m coastertrack` after `pip install -e .`, but works
straight from a clone by putting ./src first on the import path.

    $ python run.py --curve spline --style "B&M" --cross-ties --show
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from coastertrack.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
