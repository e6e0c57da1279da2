"""modsweep - cleanup engine for downloaded mod archive libraries."""

__version__ = "0.1.0"
