"""Sinks for gauge samples."""
