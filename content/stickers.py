"""스티커 이미지 로더 모듈 — 메모리 / 로컬 디렉토리 / HTTP.

모든 로더는 `resolve(asset_ref)` 코루틴을 제공한다.
이미지가 없으면 None을 반환하고, 디코딩 실패나 네트워크 오류는 예외로 전달한다.
"""

import asyncio
import logging
from io import BytesIO
from pathlib import Path
from typing import Mapping, Protocol

from PIL import Image

logger = logging.getLogger(__name__)


class AssetResolver(Protocol):
    """스티커 이미지 공급자."""

    async def resolve(self, asset_ref: str) -> Image.Image | None: ...


def decode_image(data: bytes) -> Image.Image:
    """이미지 바이트를 RGBA 이미지로 디코딩한다."""
    img = Image.open(BytesIO(data))
    img.load()
    return img.convert("RGBA")


def sticker_filename(kit_number: str, asset_ref: str) -> str:
    """키트별 스티커 파일 경로 (kit-005/005-001.png)."""
    return f"kit-{kit_number}/{asset_ref}.png"


class MemoryAssetResolver:
    """메모리에 있는 이미지(또는 인코딩된 바이트)를 반환한다."""

    def __init__(self, assets: Mapping[str, Image.Image | bytes] | None = None):
        self._assets = dict(assets or {})

    async def resolve(self, asset_ref: str) -> Image.Image | None:
        asset = self._assets.get(asset_ref)
        if asset is None:
            return None
        if isinstance(asset, bytes):
            return decode_image(asset)
        return asset.convert("RGBA")


class DirectoryAssetResolver:
    """로컬 스티커 디렉토리에서 PNG를 읽는다."""

    def __init__(self, root: str | Path, kit_number: str):
        self._root = Path(root)
        self._kit_number = kit_number

    def path_for(self, asset_ref: str) -> Path:
        return self._root / sticker_filename(self._kit_number, asset_ref)

    async def resolve(self, asset_ref: str) -> Image.Image | None:
        path = self.path_for(asset_ref)
        if not path.exists():
            logger.debug("스티커 파일 없음: %s", path)
            return None
        # 파일 읽기와 디코딩은 스레드에서 처리해 다른 로딩과 겹치게 한다
        data = await asyncio.to_thread(path.read_bytes)
        return await asyncio.to_thread(decode_image, data)


class HttpAssetResolver:
    """에셋 서버(CDN)에서 스티커 PNG를 받아온다."""

    def __init__(self, base_url: str, kit_number: str, timeout_sec: float = 10):
        self._base_url = base_url.rstrip("/")
        self._kit_number = kit_number
        self._timeout_sec = timeout_sec

    def url_for(self, asset_ref: str) -> str:
        return f"{self._base_url}/{sticker_filename(self._kit_number, asset_ref)}"

    async def resolve(self, asset_ref: str) -> Image.Image | None:
        import aiohttp

        url = self.url_for(asset_ref)
        timeout = aiohttp.ClientTimeout(total=self._timeout_sec)
        async with aiohttp.ClientSession() as session:
            async with session.get(url, timeout=timeout) as resp:
                if resp.status == 404:
                    logger.debug("스티커 없음(404): %s", url)
                    return None
                resp.raise_for_status()
                data = await resp.read()
        return await asyncio.to_thread(decode_image, data)


# ---------------------------------------------------------------------------
# 팩토리 함수
# ---------------------------------------------------------------------------

def create_asset_resolver(config: dict, kit_number: str):
    """config에 따라 적절한 스티커 로더를 생성한다."""
    provider = config.get("provider", "directory")
    directory = config.get("directory", "public/assets/stickers/")

    if provider == "http":
        base_url = config.get("base_url", "")
        if not base_url:
            logger.warning("에셋 서버 주소 없음, 로컬 디렉토리로 대체")
            return DirectoryAssetResolver(directory, kit_number)
        return HttpAssetResolver(
            base_url,
            kit_number,
            timeout_sec=config.get("timeout_sec", 10),
        )

    return DirectoryAssetResolver(directory, kit_number)
