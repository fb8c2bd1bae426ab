"""Logging helpers for PyUploadHub."""
