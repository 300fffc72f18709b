"""Command line interface (``python -m sheetdoc.cli``)."""
