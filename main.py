"""키트 썸네일 일괄 생성.

사용법:
    python main.py                  # 공개된 모든 키트
    python main.py --kit 005        # 키트 하나만
    python main.py --default        # "No Preview" 기본 썸네일
    python main.py --config my.json --output out/
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from config import load_config
from content.kits import KitRecord, SqliteLayoutSource
from content.stickers import create_asset_resolver
from thumbnail import ThumbnailPipeline, render_default_thumbnail, write_output

logger = logging.getLogger("main")


async def generate_kit(
    pipeline: ThumbnailPipeline,
    source: SqliteLayoutSource,
    kit: KitRecord,
    config: dict,
    output_dir: Path,
) -> Path:
    """키트 하나의 썸네일을 만들어 kit-<번호>.png로 저장한다."""
    records = source.layouts_for_kit(kit.id)
    resolver = create_asset_resolver(config["assets"], kit.kit_number)
    out_path = output_dir / f"kit-{kit.kit_number}.png"

    thumb = await pipeline.render_to(kit.color, records, resolver, out_path)
    logger.info(
        "썸네일 생성: %s (스티커 %d개, 건너뜀 %d개)",
        out_path, thumb.drawn, len(thumb.skipped),
    )
    return out_path


async def generate_all(config: dict, output_dir: Path, kit_number: str | None = None) -> int:
    """공개 키트 썸네일을 차례로 생성한다. 실패한 키트 수를 반환한다."""
    source = SqliteLayoutSource(config["database"]["path"])
    pipeline = ThumbnailPipeline(max_concurrency=config["assets"].get("max_concurrency", 8))

    kits = source.published_kits()
    if kit_number is not None:
        kits = [k for k in kits if k.kit_number == kit_number]
        if not kits:
            logger.error("공개된 키트를 찾지 못했습니다: %s", kit_number)
            return 1
    logger.info("공개 키트 %d개", len(kits))

    failed = 0
    for kit in kits:
        try:
            await generate_kit(pipeline, source, kit, config, output_dir)
        except Exception as e:
            logger.error("키트 %s 썸네일 생성 실패: %s", kit.kit_number, e)
            failed += 1
    return failed


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="스티커 키트 썸네일 생성")
    parser.add_argument("--config", "-c", type=str, default=None, help="설정 파일 (기본: config.json)")
    parser.add_argument("--kit", "-k", type=str, default=None, help="이 키트 번호만 생성 (예: 005)")
    parser.add_argument("--default", action="store_true", help="기본 썸네일(default.png) 생성")
    parser.add_argument("--output", "-o", type=str, default=None, help="출력 디렉토리")
    args = parser.parse_args(argv)

    config = load_config(Path(args.config) if args.config else None)
    logging.basicConfig(
        level=config["logging"].get("level", "INFO"),
        format="%(asctime)s [%(name)s] %(message)s",
    )
    output_dir = Path(args.output or config["output"]["directory"])

    if args.default:
        out_path = output_dir / "default.png"
        write_output(render_default_thumbnail(), out_path)
        logger.info("기본 썸네일 생성: %s", out_path)
        return 0

    try:
        failed = asyncio.run(generate_all(config, output_dir, args.kit))
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    if failed:
        logger.error("썸네일 생성 실패 %d건", failed)
        return 1
    logger.info("썸네일 생성 완료")
    return 0


if __name__ == "__main__":
    sys.exit(main())
