"""Property-based tests using Hypothesis.

Invariants of the size-reduction stages: resampling never upscales, the
quality search either fits the ceiling or exhausts every step, and chunked
base64 always matches single-shot encoding.
"""

import base64
from io import BytesIO

from hypothesis import given, settings
from hypothesis import strategies as st
from PIL import Image

from image_namer.errors import EncodeBudgetExceeded
from image_namer.imaging.decoder import decode_image
from image_namer.imaging.encoder import QualitySearchStrategy
from image_namer.imaging.resampler import resample, target_size
from image_namer.models import PixelBuffer
from image_namer.transport import encode_base64_chunked

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

dimensions = st.integers(min_value=1, max_value=5000)
caps = st.integers(min_value=1, max_value=2048)
formats = st.sampled_from([("JPEG", "image/jpeg"), ("PNG", "image/png"), ("WEBP", "image/webp")])


def _encode(width: int, height: int, fmt: str) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), color=(width % 256, height % 256, 90)).save(buf, format=fmt)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# target_size / resample
# ---------------------------------------------------------------------------


class TestTargetSizeProperties:
    @given(dimensions, dimensions, caps)
    def test_never_upscales(self, w: int, h: int, cap: int) -> None:
        new_w, new_h = target_size(w, h, cap)
        assert new_w <= w
        assert new_h <= h

    @given(dimensions, dimensions, caps)
    def test_fits_cap(self, w: int, h: int, cap: int) -> None:
        assert max(target_size(w, h, cap)) <= max(cap, 1)

    @given(dimensions, dimensions, caps)
    def test_positive(self, w: int, h: int, cap: int) -> None:
        new_w, new_h = target_size(w, h, cap)
        assert new_w >= 1
        assert new_h >= 1

    @given(dimensions, dimensions, caps)
    def test_longest_edge_hits_cap_when_scaled(self, w: int, h: int, cap: int) -> None:
        if max(w, h) > cap:
            assert max(target_size(w, h, cap)) == cap


class TestDecodeResampleProperties:
    @settings(deadline=None)
    @given(
        st.integers(min_value=1, max_value=700),
        st.integers(min_value=1, max_value=700),
        st.integers(min_value=16, max_value=600),
        formats,
    )
    def test_decoded_images_never_upscaled(
        self, w: int, h: int, cap: int, fmt: tuple[str, str]
    ) -> None:
        pillow_format, media_type = fmt
        pixels = decode_image(_encode(w, h, pillow_format), media_type)
        result = resample(pixels, cap)
        assert result.max_dimension <= pixels.max_dimension
        assert result.max_dimension <= cap
        assert len(result.data) == result.width * result.height * result.channels


class TestQualitySearchProperties:
    @settings(deadline=None, max_examples=15)
    @given(
        st.integers(min_value=8, max_value=96),
        st.integers(min_value=8, max_value=96),
        st.integers(min_value=200, max_value=20_000),
        st.binary(min_size=1, max_size=64),
    )
    def test_fits_or_exhausts(self, w: int, h: int, ceiling: int, seed: bytes) -> None:
        raw = (seed * (w * h * 3 // len(seed) + 1))[: w * h * 3]
        pixels = PixelBuffer(width=w, height=h, channels=3, data=raw)
        strategy = QualitySearchStrategy(ceiling=ceiling, max_dimension=None)
        try:
            candidate = strategy.compress(pixels)
        except EncodeBudgetExceeded as e:
            assert e.min_quality == strategy.qualities()[-1]
            assert e.smallest > ceiling
        else:
            assert candidate.size <= ceiling
            assert candidate.quality in strategy.qualities()


class TestBase64Properties:
    @given(st.binary(max_size=4096), st.integers(min_value=1, max_value=64))
    def test_chunked_matches_single_shot(self, data: bytes, chunk_size: int) -> None:
        assert encode_base64_chunked(data, chunk_size) == base64.b64encode(data).decode()
