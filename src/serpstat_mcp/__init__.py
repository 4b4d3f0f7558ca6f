"""Serpstat tools for the Model Context Protocol."""

__version__ = "0.3.0"

__all__ = ["__version__"]
