"""키트·레이아웃 데이터 모듈 — 레이아웃 레코드 타입과 SQLite 조회."""

import logging
import math
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutRecord:
    """스티커 하나의 배치 정보."""
    id: str
    x: float              # 스티커 영역 폭 대비 % (좌상단 기준)
    y: float              # 스티커 영역 높이 대비 %
    size_px: int          # 정사각형 한 변 (px)
    rotation_deg: float   # 시계 방향 회전 각도
    asset_ref: str        # 스티커 이미지 ID (full_id)
    order: int            # 그리는 순서 (작을수록 아래)
    uploaded: bool = True


@dataclass(frozen=True)
class KitRecord:
    """썸네일을 만들 키트."""
    id: str
    kit_number: str
    color: str | None


class LayoutSource(Protocol):
    """레이아웃 레코드 공급자."""

    def published_kits(self) -> list[KitRecord]: ...

    def layouts_for_kit(self, kit_id: str) -> list[LayoutRecord]: ...


_LAYOUTS_SQL = """
    SELECT sl.id, sl.x, sl.y, sl.size, sl.rotation, sl.sort_order,
           s.full_id, s.image_uploaded
    FROM sticker_layouts sl
    JOIN stickers s ON sl.sticker_id = s.id
    WHERE s.kit_id = ?
    ORDER BY sl.sort_order
"""

# NULL이면 배치할 수 없는 컬럼 (rotation은 0으로 본다)
_REQUIRED_COLUMNS = ("x", "y", "size", "sort_order")

_KITS_SQL = "SELECT id, kit_number, color FROM kits WHERE status = 'published' ORDER BY kit_number"


class SqliteLayoutSource:
    """스티커 DB(SQLite)에서 키트와 레이아웃을 읽는다."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def _connect(self) -> sqlite3.Connection:
        if not self._path.exists():
            raise FileNotFoundError(f"DB 파일 없음: {self._path}")
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        return conn

    def published_kits(self) -> list[KitRecord]:
        """공개된 키트 목록을 반환한다."""
        conn = self._connect()
        try:
            rows = conn.execute(_KITS_SQL).fetchall()
        finally:
            conn.close()
        return [KitRecord(id=r["id"], kit_number=r["kit_number"], color=r["color"]) for r in rows]

    def layouts_for_kit(self, kit_id: str) -> list[LayoutRecord]:
        """키트의 레이아웃을 sort_order 순으로 반환한다."""
        conn = self._connect()
        try:
            rows = conn.execute(_LAYOUTS_SQL, (kit_id,)).fetchall()
        finally:
            conn.close()

        records = []
        for r in rows:
            missing = [col for col in _REQUIRED_COLUMNS if r[col] is None]
            if missing:
                logger.warning("레이아웃 %s 값 없음 (%s), 건너뜀", r["id"], ", ".join(missing))
                continue
            records.append(LayoutRecord(
                id=r["id"],
                x=float(r["x"]),
                y=float(r["y"]),
                size_px=math.floor(float(r["size"]) + 0.5),
                rotation_deg=float(r["rotation"] or 0),
                asset_ref=r["full_id"],
                order=int(r["sort_order"]),
                uploaded=bool(r["image_uploaded"]),
            ))
        logger.debug("키트 %s 레이아웃 %d개", kit_id, len(records))
        return records
