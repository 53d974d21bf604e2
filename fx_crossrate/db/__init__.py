"""Persistence helpers for converter configurations."""

from __future__ import annotations

from fx_crossrate.db.configuration_store import PersistenceResult, RateConfigurationStore

__all__ = ["PersistenceResult", "RateConfigurationStore"]
