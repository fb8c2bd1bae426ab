"""Configuration for PyUploadHub."""
