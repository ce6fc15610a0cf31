"""fitsync - data sync and maintenance for a local fitness tracker store."""

__version__ = "1.0.0"
