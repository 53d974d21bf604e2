"""Readers and writers for direct-rate configuration files."""
