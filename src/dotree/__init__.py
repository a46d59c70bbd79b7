"""dotree: a keyboard-driven command launcher."""

__version__ = "0.1.0"
