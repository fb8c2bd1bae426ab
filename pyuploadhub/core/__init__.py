"""Core upload handling for PyUploadHub."""
