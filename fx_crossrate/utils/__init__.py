"""Shared helpers for fx_crossrate."""
