"""스티커 레이아웃 투영 모듈 — 퍼센트 좌표와 회전을 캔버스 픽셀 좌표로 변환한다.

미리보기 화면은 스티커를 `left: X%; top: Y%; transform: rotate(Rdeg)` 로 배치한다.
X/Y는 스티커 영역(280x380)에 대한 비율이며 회전 전 좌상단 기준이다.
"""

import math
from dataclasses import dataclass

from PIL import Image

from content.kits import LayoutRecord
from renderer.canvas import STICKER_AREA, StickerArea

_TRANSPARENT = (0, 0, 0, 0)


def round_half_up(value: float) -> int:
    """0.5를 항상 올리는 반올림 (브라우저 레이아웃 계산과 동일)."""
    return math.floor(value + 0.5)


@dataclass
class ProjectedLayer:
    """회전까지 적용된 레이어 버퍼와 캔버스 기준 배치 위치."""
    image: Image.Image
    left: int
    top: int

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


class LayoutProjector:
    """레이아웃 레코드 하나를 캔버스 위의 레이어로 변환한다."""

    def __init__(self, area: StickerArea = STICKER_AREA):
        self._area = area

    def anchor(self, record: LayoutRecord) -> tuple[int, int]:
        """회전 전 좌상단 좌표 (left, top)를 계산한다."""
        left = round_half_up(record.x / 100 * self._area.width)
        top = round_half_up(self._area.top_offset + record.y / 100 * self._area.height)
        return left, top

    def project(self, record: LayoutRecord, asset: Image.Image) -> ProjectedLayer:
        """에셋을 정사각형으로 맞추고 회전한 뒤 배치 위치와 함께 반환한다."""
        size = round_half_up(record.size_px)
        if size <= 0:
            raise ValueError(f"스티커 크기가 0 이하: {record.size_px}")

        image = contain(asset, size)
        if record.rotation_deg != 0:
            image = rotate(image, record.rotation_deg)

        left, top = self.anchor(record)
        return ProjectedLayer(image=image, left=left, top=top)


def contain(asset: Image.Image, size: int) -> Image.Image:
    """비율을 유지한 채 size x size 안에 맞추고 남는 부분은 투명하게 채운다."""
    if asset.width <= 0 or asset.height <= 0:
        raise ValueError(f"빈 에셋: {asset.size}")
    if asset.mode != "RGBA":
        asset = asset.convert("RGBA")

    scale = min(size / asset.width, size / asset.height)
    w = max(1, min(size, round_half_up(asset.width * scale)))
    h = max(1, min(size, round_half_up(asset.height * scale)))
    resized = asset.resize((w, h), Image.Resampling.LANCZOS)
    if (w, h) == (size, size):
        return resized

    square = Image.new("RGBA", (size, size), _TRANSPARENT)
    square.paste(resized, ((size - w) // 2, (size - h) // 2))
    return square


def rotate(image: Image.Image, degrees: float) -> Image.Image:
    """중심 기준으로 시계 방향 회전한다. 결과 버퍼는 회전된 사각형을 모두 담도록 커진다."""
    # PIL은 반시계 방향이 양수
    return image.rotate(
        -degrees,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=_TRANSPARENT,
    )
