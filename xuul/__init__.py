"""HTTP API service bundling lookup endpoints behind a uniform JSON envelope."""

__version__ = "0.1.0"