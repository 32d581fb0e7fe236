"""레이어 합성 모듈 — 그라데이션 배경 + 스티커 레이어."""

from PIL import Image

from renderer.canvas import Canvas
from renderer.clip import ClippedLayer


class LayerCompositor:
    """배경 위에 스티커 레이어들을 순서대로 합성하여 최종 이미지를 만든다."""

    def compose(
        self,
        background: Image.Image,
        layers: list[ClippedLayer] | None = None,
    ) -> Image.Image:
        """배경 위에 레이어를 앞에서부터 차례로 합성한 RGBA 이미지를 반환한다.

        Args:
            background: 280x420 배경 이미지 (수정되지 않음)
            layers: 이미 잘린 레이어 리스트. 뒤에 있을수록 위에 그려진다.

        Returns:
            280x420 RGBA 이미지
        """
        canvas = Canvas(background)

        # 페인터 알고리즘: 리스트 순서 = 그리는 순서
        for layer in layers or []:
            canvas.paste(layer.image, (layer.dest_x, layer.dest_y))

        return canvas.image
