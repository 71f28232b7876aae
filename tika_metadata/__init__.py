"""Document metadata extraction with Apache Tika."""

__version__ = "0.1.0"
