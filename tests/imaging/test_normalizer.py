"""Tests for ministore/imaging/normalizer.py"""

import io

import pytest
from PIL import Image

from ministore.common.config_loader import ImageProfile
from ministore.common.errors import EncodingError
from ministore.imaging.normalizer import ImageNormalizer, scaled_size

from conftest import make_image


def _decode(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.fixture
def normalizer():
    return ImageNormalizer()


class TestScaledSize:
    def test_landscape_bounded_by_width(self):
        assert scaled_size(1600, 1200, 800) == (800, 600)

    def test_portrait_bounded_by_height(self):
        assert scaled_size(1000, 2000, 800) == (400, 800)

    def test_small_image_not_upscaled(self):
        assert scaled_size(300, 200, 800) == (300, 200)

    def test_exact_bound_unchanged(self):
        assert scaled_size(800, 400, 800) == (800, 400)

    def test_rounding(self):
        assert scaled_size(1001, 333, 400) == (400, 133)


class TestNormalize:
    def test_large_image_larger_side_equals_bound(self, normalizer):
        out = _decode(normalizer.normalize(make_image(1600, 1200), 800, 0.7))
        assert max(out.size) == 800
        assert out.size == (800, 600)

    def test_small_image_keeps_dimensions(self, normalizer):
        out = _decode(normalizer.normalize(make_image(320, 240), 800, 0.7))
        assert out.size == (320, 240)

    def test_output_is_jpeg(self, normalizer):
        out = _decode(normalizer.normalize(make_image(100, 100, fmt="PNG"), 800, 0.7))
        assert out.format == "JPEG"
        assert out.mode == "RGB"

    def test_transparent_png_flattened(self, normalizer):
        data = make_image(50, 50, fmt="PNG", mode="RGBA")
        out = _decode(normalizer.normalize(data, 800, 0.8))
        assert out.mode == "RGB"

    def test_grayscale_converted(self, normalizer):
        out = _decode(normalizer.normalize(make_image(60, 40, mode="L"), 800, 0.8))
        assert out.mode == "RGB"
        assert out.size == (60, 40)

    def test_logo_profile(self, normalizer):
        out = _decode(normalizer.normalize_with(make_image(1200, 600), ImageProfile(400, 0.8)))
        assert out.size == (400, 200)

    def test_lower_quality_is_not_larger(self, normalizer):
        # Noisy source so JPEG quality actually changes the output size
        img = Image.effect_noise((400, 400), 64).convert("RGB")
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        high = normalizer.normalize(buffer.getvalue(), 800, 0.95)
        low = normalizer.normalize(buffer.getvalue(), 800, 0.3)
        assert len(low) < len(high)

    def test_garbage_raises_encoding_error(self, normalizer):
        with pytest.raises(EncodingError):
            normalizer.normalize(b"definitely not an image", 800, 0.7)

    def test_empty_raises_encoding_error(self, normalizer):
        with pytest.raises(EncodingError):
            normalizer.normalize(b"", 800, 0.7)

    @pytest.mark.parametrize("max_dimension,quality", [(0, 0.7), (800, 0), (800, 1.5)])
    def test_bad_arguments_raise_value_error(self, normalizer, max_dimension, quality):
        with pytest.raises(ValueError):
            normalizer.normalize(make_image(10, 10), max_dimension, quality)

    def test_oversized_image_raises_encoding_error(self, normalizer, monkeypatch):
        # 100x100 is more than twice a 1000-pixel limit
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        with pytest.raises(EncodingError):
            normalizer.normalize(make_image(100, 100), 800, 0.7)
