"""covtrace - Clover coverage indexing, metrics, and test result parsing."""

__version__ = "0.1.0"
