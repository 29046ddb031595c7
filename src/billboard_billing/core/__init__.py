"""Core utilities: configuration, logging, dates and money helpers."""
