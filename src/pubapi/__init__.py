"""pubapi - diff the public API of a Python package between two versions."""

__version__ = "0.1.0"
