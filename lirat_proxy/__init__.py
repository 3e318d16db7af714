"""Caching proxy for lirat.org exchange-rate data."""

__version__ = "0.1.0"
