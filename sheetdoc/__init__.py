"""Spreadsheet rows -> document placeholder replacement pipeline."""

__version__ = "0.1.0"
