"""Checkpoint utilities using SQLite + compressed blob."""
from __future__ import annotations
import sqlite3
import zlib
import json
from contextlib import closing
from pathlib import Path
from typing import Any, Dict


def save_checkpoint(path: Path, state: Dict[str, Any]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(path)) as conn:
        conn.execute("CREATE TABLE IF NOT EXISTS checkpoints(id INTEGER PRIMARY KEY, generation INTEGER, payload BLOB)")
        payload = zlib.compress(json.dumps(state).encode("utf-8"))
        conn.execute("INSERT INTO checkpoints(generation, payload) VALUES (?, ?)", (state.get("generation"), payload))
        conn.commit()


def load_checkpoint(path: Path, generation: int | None = None) -> Dict[str, Any]:
    """Latest checkpoint, or the latest one written at ``generation``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No checkpoint database at {path}")
    with closing(sqlite3.connect(path)) as conn:
        if generation is None:
            cur = conn.execute("SELECT payload FROM checkpoints ORDER BY id DESC LIMIT 1")
        else:
            cur = conn.execute(
                "SELECT payload FROM checkpoints WHERE generation = ? ORDER BY id DESC LIMIT 1", (generation,)
            )
        row = cur.fetchone()
    if not row:
        raise FileNotFoundError("No checkpoint entries")
    return json.loads(zlib.decompress(row[0]).decode("utf-8"))


def list_checkpoints(path: Path) -> list[int]:
    with closing(sqlite3.connect(Path(path))) as conn:
        rows = conn.execute("SELECT generation FROM checkpoints ORDER BY id").fetchall()
    return [int(r[0]) for r in rows]
