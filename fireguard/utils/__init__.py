"""Logging and exception utilities."""
