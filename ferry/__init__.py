"""Ferry: Marathon application deployment engine."""

__version__ = "0.1.0"
