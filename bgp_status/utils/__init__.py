"""Shared utilities: configuration, logging, errors, timeouts, processes."""
