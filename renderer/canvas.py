"""280x420 썸네일 캔버스 관리 모듈."""

from dataclasses import dataclass

from PIL import Image

# 썸네일 크기 (미리보기 카드와 동일)
WIDTH = 280
HEIGHT = 420


@dataclass(frozen=True)
class StickerArea:
    """스티커 배치 영역. 상단은 키트 이름 라벨 영역으로 비워 둔다."""
    width: int = 280
    height: int = 380
    top_offset: int = 40


STICKER_AREA = StickerArea()


class Canvas:
    """280x420 RGBA 캔버스."""

    def __init__(self, background: Image.Image | None = None):
        if background is None:
            self._image = Image.new("RGBA", (WIDTH, HEIGHT), (0, 0, 0, 0))
        else:
            self._image = _fit(background)

    @property
    def image(self) -> Image.Image:
        return self._image

    def paste(self, layer: Image.Image, position: tuple = (0, 0)) -> None:
        """레이어를 캔버스 위에 합성한다 (source-over 알파 블렌딩)."""
        if layer.mode != "RGBA":
            layer = layer.convert("RGBA")
        self._image = Image.alpha_composite(self._image, _place(layer, position))


def _fit(image: Image.Image) -> Image.Image:
    """배경을 RGBA 캔버스 크기로 맞춘다. 원본은 수정하지 않는다."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    if image.size != (WIDTH, HEIGHT):
        raise ValueError(f"배경 크기 불일치: {image.size} != {(WIDTH, HEIGHT)}")
    return image.copy()


def _place(layer: Image.Image, position: tuple) -> Image.Image:
    """레이어를 캔버스 크기의 투명 이미지 위 지정 위치에 배치한다."""
    if layer.size == (WIDTH, HEIGHT) and position == (0, 0):
        return layer
    result = Image.new("RGBA", (WIDTH, HEIGHT), (0, 0, 0, 0))
    result.paste(layer, position)
    return result
