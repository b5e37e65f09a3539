"""gitscope - read-side analysis engine for a git porcelain."""

__version__ = "0.3.0"
