"""테스트용 스티커 DB 생성."""

from __future__ import annotations

import sqlite3
from pathlib import Path

SCHEMA = """
CREATE TABLE kits (id TEXT PRIMARY KEY, kit_number TEXT, color TEXT, status TEXT);
CREATE TABLE stickers (id TEXT PRIMARY KEY, kit_id TEXT, full_id TEXT, image_uploaded INTEGER);
CREATE TABLE sticker_layouts (
    id TEXT PRIMARY KEY, sticker_id TEXT, x REAL, y REAL, size REAL, rotation REAL, sort_order INTEGER
);
"""


def create_db(path: Path) -> Path:
    """키트 2개(공개 1, 초안 1)와 레이아웃 3개를 가진 DB를 만든다."""
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        conn.executemany(
            "INSERT INTO kits VALUES (?, ?, ?, ?)",
            [
                ("kit-a", "001", "#FF6B6B", "published"),
                ("kit-b", "002", "#4ECDC4", "draft"),
            ],
        )
        conn.executemany(
            "INSERT INTO stickers VALUES (?, ?, ?, ?)",
            [
                ("s1", "kit-a", "001-001", 1),
                ("s2", "kit-a", "001-002", 0),
                ("s3", "kit-a", "001-003", 1),
            ],
        )
        conn.executemany(
            "INSERT INTO sticker_layouts VALUES (?, ?, ?, ?, ?, ?, ?)",
            [
                ("l3", "s3", 70, 45, 75, 5, 2),
                ("l1", "s1", 25, 20, 70.5, -5, 0),
                ("l2", "s2", 75, 15, 65, 8, 1),
            ],
        )
        conn.commit()
    finally:
        conn.close()
    return path
