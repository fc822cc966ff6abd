"""boardctl: board, column, and card tracking with a JSON snapshot store."""

__version__ = "0.1.0"
