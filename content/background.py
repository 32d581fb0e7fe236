"""배경 생성 모듈 — 키트 테마 색상의 대각선 그라데이션 배경."""

import logging
import re

from PIL import Image

from renderer.canvas import WIDTH, HEIGHT

logger = logging.getLogger(__name__)

# 색상이 없거나 잘못됐을 때 쓰는 회색
FALLBACK_COLOR = "#9CA3AF"

# 좌상단 → 우하단 알파 값
ALPHA_START = 0.25
ALPHA_END = 0.125

_HEX_RE = re.compile(r"#?([0-9a-fA-F]{6})")


def parse_color(color: str | None) -> tuple[int, int, int] | None:
    """'#RRGGBB' 또는 'RRGGBB' 를 RGB 튜플로 변환한다. 형식이 틀리면 None."""
    if not isinstance(color, str):
        return None
    m = _HEX_RE.fullmatch(color.strip())
    if m is None:
        return None
    h = m.group(1)
    return tuple(int(h[i:i + 2], 16) for i in (0, 2, 4))


def resolve_color(color: str | None) -> tuple[int, int, int]:
    """테마 색상을 RGB로 변환한다. 실패하면 회색으로 대체한다."""
    rgb = parse_color(color)
    if rgb is None:
        logger.debug("잘못된 색상 %r, 기본 회색 사용", color)
        rgb = parse_color(FALLBACK_COLOR)
    return rgb


def _lerp(a: float, b: float, t: float) -> float:
    """두 값을 t(0~1) 비율로 선형 보간한다."""
    return a + (b - a) * t


class GradientBackground:
    """테마 색상으로 카드 배경 그라데이션을 만든다.

    SVG `linearGradient x1=0% y1=0% x2=100% y2=100%` 과 같은 결과로,
    바운딩 박스 좌표계에서 대각선 방향으로 알파가 0.25 → 0.125로 줄어든다.
    """

    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self._width = width
        self._height = height
        self._alpha = self._build_alpha()

    def _build_alpha(self) -> Image.Image:
        """위치별 알파 채널. 색상과 무관하므로 한 번만 계산한다."""
        w, h = self._width, self._height
        values = []
        for y in range(h):
            v = (y + 0.5) / h
            for x in range(w):
                # 정규화 좌표 (u, v) 를 (1, 1) 방향으로 투영
                t = ((x + 0.5) / w + v) / 2
                a = _lerp(ALPHA_START, ALPHA_END, t)
                values.append(int(a * 255 + 0.5))
        alpha = Image.new("L", (w, h))
        alpha.putdata(values)
        return alpha

    def render(self, color: str | None) -> Image.Image:
        """그라데이션 배경 RGBA 이미지를 반환한다. 예외를 던지지 않는다."""
        r, g, b = resolve_color(color)
        size = (self._width, self._height)
        return Image.merge("RGBA", (
            Image.new("L", size, r),
            Image.new("L", size, g),
            Image.new("L", size, b),
            self._alpha,
        ))


_default_generator: GradientBackground | None = None


def gradient_background(color: str | None) -> Image.Image:
    """기본 캔버스 크기의 그라데이션 배경."""
    global _default_generator
    if _default_generator is None:
        _default_generator = GradientBackground()
    return _default_generator.render(color)
