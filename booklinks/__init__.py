"""BookLinks - discover which books reference other books."""

__version__ = "0.1.0"
