"""swapwatch - high-volume Garden swap monitor with competitor comparison."""

__version__ = "0.1.0"
