import logging

import pytest

from coastertrack.logging_config import setup_logging
from coastertrack.main import build_parser, main, options_from_args, parse_keyframes


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("coastertrack")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_parse_keyframes_percent_degrees() -> None:
    bank = parse_keyframes("0:0, 50:90, 100:0")
    assert [k.t for k in bank.keyframes] == [0.0, 0.5, 1.0]
    assert bank.angle_at(0.5) == pytest.approx(1.5707963, rel=1e-6)


def test_constant_bank_option() -> None:
    args = build_parser().parse_args(["--bank-degrees", "30", "--style", "skeleton"])
    options = options_from_args(args)
    assert options.bank_profile().angle_at(0.3) == pytest.approx(0.5235988, rel=1e-6)
    assert options.style == "skeleton"


def test_main_writes_hdf5(tmp_path) -> None:
    out = tmp_path / "demo.h5"
    code = main(["--curve", "spline", "--divisions", "20", "--cross-ties", "--output", str(out),
                 "--log-level", "WARNING"])
    assert code == 0
    assert out.exists()


def test_main_reports_invalid_divisions() -> None:
    assert main(["--divisions", "0", "--log-level", "ERROR"]) == 2


def test_setup_logging_accepts_level_names(tmp_path) -> None:
    log_file = tmp_path / "build.log"
    logger = setup_logging("debug", log_file=str(log_file))
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    logging.getLogger("coastertrack.controller.mesher").debug("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "hello" in log_file.read_text(encoding="utf-8")


def test_setup_logging_replaces_handlers() -> None:
    setup_logging(logging.INFO)
    logger = setup_logging(logging.WARNING)
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_setup_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        setup_logging("loud")
