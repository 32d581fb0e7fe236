"""키트 썸네일 생성 파이프라인.

레이아웃 레코드 + 스티커 이미지 → 투영 → 클리핑 → 합성 → PNG.
스티커 이미지는 동시에 불러오지만 합성은 항상 그리는 순서대로 한 번에 한 장씩 한다.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from PIL import Image, ImageChops, ImageDraw

from content.background import FALLBACK_COLOR, gradient_background, resolve_color
from content.kits import LayoutRecord
from content.stickers import AssetResolver
from renderer.canvas import STICKER_AREA, StickerArea
from renderer.clip import ClippedLayer, EdgeClipper
from renderer.layers import LayerCompositor
from renderer.layout import LayoutProjector
from renderer.text import draw_centered_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_CORNER_RADIUS = 8

# 스킵 사유
SKIP_NOT_UPLOADED = "not uploaded"
SKIP_ABSENT = "absent"
SKIP_CLIPPED = "clipped"


class ThumbnailError(Exception):
    """썸네일을 만들지 못했다."""


class EncodeError(ThumbnailError):
    """최종 이미지를 PNG로 인코딩하지 못했다."""


class OutputWriteError(ThumbnailError):
    """인코딩된 썸네일을 저장하지 못했다."""


@dataclass(frozen=True)
class LayerSkip:
    """그려지지 않은 레이어와 그 이유."""
    record_id: str
    asset_ref: str
    reason: str


@dataclass
class Thumbnail:
    """합성 결과."""
    image: Image.Image
    drawn: int = 0
    skipped: list[LayerSkip] = field(default_factory=list)


def encode_png(image: Image.Image) -> bytes:
    """이미지를 PNG 바이트로 인코딩한다."""
    try:
        buf = BytesIO()
        image.save(buf, format="PNG")
    except Exception as e:
        raise EncodeError(f"PNG 인코딩 실패: {e}") from e
    return buf.getvalue()


def write_output(data: bytes, sink: str | Path | BinaryIO) -> None:
    """PNG 바이트를 파일 경로 또는 바이너리 스트림에 쓴다."""
    try:
        if isinstance(sink, (str, Path)):
            path = Path(sink)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        else:
            sink.write(data)
    except Exception as e:
        raise OutputWriteError(f"썸네일 저장 실패: {e}") from e


class ThumbnailPipeline:
    """배경·투영·클리핑·합성을 묶어 280x420 썸네일을 만든다."""

    def __init__(
        self,
        area: StickerArea = STICKER_AREA,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        self._projector = LayoutProjector(area)
        self._clipper = EdgeClipper()
        self._compositor = LayerCompositor()
        self._max_concurrency = max(1, max_concurrency)

    async def _load_assets(
        self, records: list[LayoutRecord], resolver: AssetResolver,
    ) -> list[Image.Image | Exception | None]:
        """레코드 순서대로 스티커 이미지를 동시에 불러온다. 실패는 예외 객체로 돌려준다."""
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def load(record: LayoutRecord) -> Image.Image | None:
            if not record.uploaded:
                return None
            async with semaphore:
                return await resolver.resolve(record.asset_ref)

        # gather는 입력 순서대로 결과를 돌려준다
        return await asyncio.gather(*(load(r) for r in records), return_exceptions=True)

    def _prepare_layer(
        self, record: LayoutRecord, asset: Image.Image | Exception | None,
    ) -> ClippedLayer | LayerSkip:
        """레코드 하나를 잘린 레이어로 만들거나, 그리지 않을 이유를 반환한다."""
        if not record.uploaded:
            return LayerSkip(record.id, record.asset_ref, SKIP_NOT_UPLOADED)
        if isinstance(asset, Exception):
            logger.warning("스티커 로드 실패: %s (%s)", record.asset_ref, asset)
            return LayerSkip(record.id, record.asset_ref, f"unavailable: {asset}")
        if asset is None:
            logger.warning("스티커 이미지 없음: %s", record.asset_ref)
            return LayerSkip(record.id, record.asset_ref, SKIP_ABSENT)

        try:
            projected = self._projector.project(record, asset)
        except Exception as e:
            logger.warning("스티커 처리 실패: %s (%s)", record.asset_ref, e)
            return LayerSkip(record.id, record.asset_ref, f"unavailable: {e}")

        clipped = self._clipper.clip(projected)
        if clipped is None:
            return LayerSkip(record.id, record.asset_ref, SKIP_CLIPPED)
        return clipped

    async def compose(
        self,
        theme_color: str | None,
        records: list[LayoutRecord],
        resolver: AssetResolver,
    ) -> Thumbnail:
        """썸네일 이미지를 합성한다. 스티커 단위 실패는 건너뛰고 기록만 한다."""
        background = gradient_background(theme_color)

        # 그리는 순서 정렬 (안정 정렬이라 이미 정렬된 입력은 그대로)
        ordered = sorted(records, key=lambda r: r.order)
        assets = await self._load_assets(ordered, resolver)

        layers: list[ClippedLayer] = []
        skipped: list[LayerSkip] = []
        for record, asset in zip(ordered, assets):
            if isinstance(asset, BaseException) and not isinstance(asset, Exception):
                # 취소 등은 부분 결과 없이 그대로 전달
                raise asset
            result = self._prepare_layer(record, asset)
            if isinstance(result, LayerSkip):
                skipped.append(result)
            else:
                layers.append(result)

        image = self._compositor.compose(background, layers)
        return Thumbnail(image=image, drawn=len(layers), skipped=skipped)

    async def render(
        self,
        theme_color: str | None,
        records: list[LayoutRecord],
        resolver: AssetResolver,
    ) -> bytes:
        """썸네일을 합성하여 PNG 바이트로 반환한다."""
        thumbnail = await self.compose(theme_color, records, resolver)
        return encode_png(thumbnail.image)

    async def render_to(
        self,
        theme_color: str | None,
        records: list[LayoutRecord],
        resolver: AssetResolver,
        sink: str | Path | BinaryIO,
    ) -> Thumbnail:
        """썸네일을 합성하여 sink에 PNG로 저장한다."""
        thumbnail = await self.compose(theme_color, records, resolver)
        write_output(encode_png(thumbnail.image), sink)
        return thumbnail


def default_thumbnail_image() -> Image.Image:
    """레이아웃이 없는 키트용 "No Preview" 회색 카드 이미지."""
    r, g, b = resolve_color(FALLBACK_COLOR)
    card = gradient_background(FALLBACK_COLOR)

    # 모서리 반경 8px 둥근 사각형 밖은 투명
    mask = Image.new("L", card.size, 0)
    ImageDraw.Draw(mask).rounded_rectangle(
        (0, 0, card.width - 1, card.height - 1), radius=DEFAULT_CORNER_RADIUS, fill=255,
    )
    card.putalpha(ImageChops.multiply(card.getchannel("A"), mask))

    return draw_centered_text(card, "No Preview", font_size=14, color=(r, g, b, 128))


def render_default_thumbnail() -> bytes:
    """기본 썸네일을 PNG 바이트로 반환한다."""
    return encode_png(default_thumbnail_image())


def render_thumbnail(
    theme_color: str | None,
    records: list[LayoutRecord],
    resolver: AssetResolver,
    area: StickerArea = STICKER_AREA,
) -> bytes:
    """동기 코드에서 썸네일 PNG를 만든다."""
    return asyncio.run(ThumbnailPipeline(area).render(theme_color, records, resolver))
