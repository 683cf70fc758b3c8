"""TrustLens trust and authenticity scoring pipeline."""

__version__ = "0.1.0"
