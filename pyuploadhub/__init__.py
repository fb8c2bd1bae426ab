"""PyUploadHub: date-sharded storage for uploaded files."""

__version__ = "0.1.0"
