"""Object diff service application."""

__version__ = "0.1.0"
