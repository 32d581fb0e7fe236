"""가장자리 클리핑 모듈 — CSS overflow: hidden 과 같은 결과를 만든다.

카드 밖으로 드래그된 스티커는 캔버스 경계에서 잘린다.
회전 후 버퍼를 기준으로 자르므로 회전으로 튀어나온 모서리도 함께 잘린다.
"""

from dataclasses import dataclass

from PIL import Image

from renderer.canvas import WIDTH, HEIGHT
from renderer.layout import ProjectedLayer


@dataclass(frozen=True)
class ClipRect:
    """원본 버퍼에서 잘라낼 영역과 캔버스 배치 위치."""
    crop_x: int
    crop_y: int
    crop_w: int
    crop_h: int
    dest_x: int
    dest_y: int

    def covers(self, size: tuple[int, int]) -> bool:
        """원본 버퍼 전체를 그대로 쓰는지 (자를 필요가 없는지)."""
        return (self.crop_x, self.crop_y) == (0, 0) and (self.crop_w, self.crop_h) == tuple(size)


@dataclass
class ClippedLayer:
    """캔버스 안에 완전히 들어오는 레이어."""
    image: Image.Image
    dest_x: int
    dest_y: int


class EdgeClipper:
    """레이어를 캔버스 경계에 맞춰 자른다."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self._width = width
        self._height = height

    def clip_rect(self, dest_x: int, dest_y: int, src_w: int, src_h: int) -> ClipRect | None:
        """보이는 영역을 계산한다. 전부 캔버스 밖이면 None."""
        crop_x = 0
        crop_y = 0
        crop_w = src_w
        crop_h = src_h

        # 왼쪽으로 벗어남
        if dest_x < 0:
            crop_x = -dest_x
            crop_w -= crop_x
            dest_x = 0
        # 위쪽으로 벗어남
        if dest_y < 0:
            crop_y = -dest_y
            crop_h -= crop_y
            dest_y = 0
        # 오른쪽으로 벗어남
        if dest_x + crop_w > self._width:
            crop_w = self._width - dest_x
        # 아래쪽으로 벗어남
        if dest_y + crop_h > self._height:
            crop_h = self._height - dest_y

        if crop_w <= 0 or crop_h <= 0:
            return None
        return ClipRect(crop_x, crop_y, crop_w, crop_h, dest_x, dest_y)

    def clip(self, layer: ProjectedLayer) -> ClippedLayer | None:
        """투영된 레이어를 잘라서 반환한다. 보이는 부분이 없으면 None."""
        rect = self.clip_rect(layer.left, layer.top, layer.width, layer.height)
        if rect is None:
            return None

        image = layer.image
        if not rect.covers(image.size):
            image = image.crop((
                rect.crop_x,
                rect.crop_y,
                rect.crop_x + rect.crop_w,
                rect.crop_y + rect.crop_h,
            ))
        return ClippedLayer(image=image, dest_x=rect.dest_x, dest_y=rect.dest_y)
