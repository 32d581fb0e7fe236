from __future__ import annotations

import asyncio
import threading
from io import BytesIO
from pathlib import Path

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from PIL import Image, UnidentifiedImageError

from content import stickers
from content.stickers import (
    DirectoryAssetResolver,
    HttpAssetResolver,
    MemoryAssetResolver,
    create_asset_resolver,
)
from tests._utils.samples import RED


def _save_sticker(root: Path, kit_number: str, asset_ref: str) -> Path:
    path = root / f"kit-{kit_number}" / f"{asset_ref}.png"
    path.parent.mkdir(parents=True)
    Image.new("RGBA", (12, 8), RED).save(path)
    return path


def test_directory_resolver_reads_kit_folder(tmp_path: Path) -> None:
    _save_sticker(tmp_path, "005", "005-001")
    img = asyncio.run(DirectoryAssetResolver(tmp_path, "005").resolve("005-001"))
    assert img is not None
    assert img.mode == "RGBA"
    assert img.size == (12, 8)


def test_directory_resolver_missing_file_is_absent(tmp_path: Path) -> None:
    assert asyncio.run(DirectoryAssetResolver(tmp_path, "005").resolve("005-009")) is None


def test_directory_resolver_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "kit-005" / "005-001.png"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\x89PNG broken")
    with pytest.raises(UnidentifiedImageError):
        asyncio.run(DirectoryAssetResolver(tmp_path, "005").resolve("005-001"))


def test_memory_resolver_decodes_bytes() -> None:
    buf = BytesIO()
    Image.new("RGB", (4, 4), (255, 0, 0)).save(buf, format="PNG")
    resolver = MemoryAssetResolver({"a": buf.getvalue()})
    img = asyncio.run(resolver.resolve("a"))
    assert img.mode == "RGBA"
    assert img.getpixel((0, 0)) == RED
    assert asyncio.run(resolver.resolve("b")) is None


def test_http_resolver_url() -> None:
    resolver = HttpAssetResolver("https://cdn.example.com/stickers/", "003")
    assert resolver.url_for("003-004") == "https://cdn.example.com/stickers/kit-003/003-004.png"


def test_factory_defaults_to_directory() -> None:
    resolver = create_asset_resolver({"directory": "assets/"}, "001")
    assert isinstance(resolver, DirectoryAssetResolver)
    assert resolver.path_for("001-002") == Path("assets/kit-001/001-002.png")


def test_factory_http_provider() -> None:
    resolver = create_asset_resolver({"provider": "http", "base_url": "https://cdn.example.com"}, "001")
    assert isinstance(resolver, HttpAssetResolver)


def test_factory_http_without_url_falls_back() -> None:
    resolver = create_asset_resolver({"provider": "http", "base_url": ""}, "001")
    assert isinstance(resolver, DirectoryAssetResolver)


def test_directory_resolver_decodes_off_the_event_loop(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _save_sticker(tmp_path, "005", "005-001")
    threads = []
    original = stickers.decode_image

    def recording_decode(data: bytes) -> Image.Image:
        threads.append(threading.current_thread())
        return original(data)

    monkeypatch.setattr(stickers, "decode_image", recording_decode)

    img = asyncio.run(DirectoryAssetResolver(tmp_path, "005").resolve("005-001"))
    assert img is not None
    assert threads and threads[0] is not threading.main_thread()


def _png_bytes(size: tuple[int, int]) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, (255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


async def _resolve_over_http(asset_refs: list[str]) -> list:
    async def sticker(request: web.Request) -> web.Response:
        name = request.match_info["name"]
        if name == "005-001.png":
            return web.Response(body=_png_bytes((4, 4)), content_type="image/png")
        if name == "005-500.png":
            return web.Response(status=500)
        return web.Response(status=404)

    app = web.Application()
    app.router.add_get("/kit-005/{name}", sticker)
    results = []
    async with TestServer(app) as server:
        resolver = HttpAssetResolver(str(server.make_url("/")), "005", timeout_sec=5)
        for asset_ref in asset_refs:
            try:
                results.append(await resolver.resolve(asset_ref))
            except aiohttp.ClientResponseError as e:
                results.append(e)
    return results


def test_http_resolver_decodes_body_to_rgba() -> None:
    [img] = asyncio.run(_resolve_over_http(["005-001"]))
    assert img.mode == "RGBA"
    assert img.size == (4, 4)
    assert img.getpixel((0, 0)) == RED


def test_http_resolver_404_is_absent() -> None:
    assert asyncio.run(_resolve_over_http(["005-404"])) == [None]


def test_http_resolver_server_error_raises() -> None:
    [err] = asyncio.run(_resolve_over_http(["005-500"]))
    assert isinstance(err, aiohttp.ClientResponseError)
    assert err.status == 500
