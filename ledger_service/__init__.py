"""In-memory account ledger served over HTTP."""

__version__ = "0.1.0"
