"""Door control over HTTP Digest authentication."""

__version__ = "0.1.0"
