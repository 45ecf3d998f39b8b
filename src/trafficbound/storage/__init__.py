from __future__ import annotations

from pathlib import Path

from trafficbound.storage.duckdb_store import Storage


def default_storage() -> Storage:
    return Storage(Path(".trafficbound/runs.duckdb"))


__all__ = ["Storage", "default_storage"]
