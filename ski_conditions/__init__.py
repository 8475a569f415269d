"""Ski conditions aggregator: scrape, normalize and publish one JSON document."""

__version__ = "0.1.0"
