"""stillframe - still-frame thumbnail extraction for video libraries."""

__version__ = "0.1.0"
