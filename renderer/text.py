"""텍스트 렌더링 모듈 — 썸네일 라벨용 산세리프 텍스트."""

import os
import sys
from PIL import Image, ImageDraw, ImageFont


def _find_sans() -> str:
    """OS에 맞는 산세리프 폰트 경로를 반환한다. 없으면 빈 문자열."""
    if sys.platform == "win32":
        candidates = ["C:/Windows/Fonts/arial.ttf", "C:/Windows/Fonts/segoeui.ttf"]
    elif sys.platform == "darwin":
        candidates = ["/System/Library/Fonts/Helvetica.ttc", "/Library/Fonts/Arial.ttf"]
    else:
        candidates = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
            "/usr/share/fonts/opentype/noto/NotoSans-Regular.ttf",
        ]
    for path in candidates:
        if os.path.exists(path):
            return path
    return ""


_SANS_FONT = _find_sans()

# 폰트 캐시
_font_cache: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}


def _get_font(size: int):
    """폰트를 로드한다 (캐싱). 시스템 폰트가 없으면 Pillow 내장 폰트."""
    if size not in _font_cache:
        if _SANS_FONT:
            _font_cache[size] = ImageFont.truetype(_SANS_FONT, size)
        else:
            _font_cache[size] = ImageFont.load_default(size)
    return _font_cache[size]


def draw_centered_text(
    image: Image.Image,
    text: str,
    font_size: int = 14,
    color: tuple = (255, 255, 255, 255),
) -> Image.Image:
    """이미지 정중앙에 텍스트를 알파 합성한 새 이미지를 반환한다.

    SVG `text-anchor="middle"` + `y="50%"` 처럼 가로는 중앙, 기준선은 세로 중앙에 둔다.
    """
    base = image.convert("RGBA")
    text_layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(text_layer)
    draw.text(
        (base.width / 2, base.height / 2),
        text,
        font=_get_font(font_size),
        fill=color,
        anchor="ms",
    )
    return Image.alpha_composite(base, text_layer)
