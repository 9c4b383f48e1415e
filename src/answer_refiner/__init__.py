"""Answer refinement with hard length enforcement."""

__version__ = "0.1.0"
