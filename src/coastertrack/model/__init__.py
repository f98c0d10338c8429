"""
The MODEL layer contains pure data structures and geometry helpers.
It has NO knowledge of the Visualization (PyVista).
It deals with Frames, Cross-Sections, Bank Profiles, Curves and I/O.
"""
