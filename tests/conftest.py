"""공통 픽스처 — 단색 스티커 이미지와 메모리 로더."""

from __future__ import annotations

import pytest
from PIL import Image

from content.stickers import MemoryAssetResolver
from tests._utils.samples import BLUE, GREEN, RED


@pytest.fixture()
def red_sticker() -> Image.Image:
    return Image.new("RGBA", (100, 100), RED)


@pytest.fixture()
def blue_sticker() -> Image.Image:
    return Image.new("RGBA", (100, 100), BLUE)


@pytest.fixture()
def wide_sticker() -> Image.Image:
    # 가로 2:1, 정사각형에 넣으면 위아래가 투명
    return Image.new("RGBA", (200, 100), GREEN)


@pytest.fixture()
def resolver(red_sticker: Image.Image, blue_sticker: Image.Image) -> MemoryAssetResolver:
    return MemoryAssetResolver({"001-001": red_sticker, "001-002": blue_sticker})
