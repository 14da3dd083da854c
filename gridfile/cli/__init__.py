# gridfile/cli/__init__.py
"""Command-line entry points."""
