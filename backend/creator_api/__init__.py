"""Creator API: cached YouTube subscriber count and fan submissions."""

__version__ = "1.0.0"
