"""Knowledge graph engine for concept relationships and learning order."""

__version__ = "0.1.0"
