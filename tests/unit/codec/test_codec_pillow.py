from __future__ import annotations

import io

import pytest
from PIL import Image

from src.media_uploader.codec.codec_pillow import PillowImageCodec, pillow_quality
from src.media_uploader.errors import ImageDecodeError


def make_image(size: tuple[int, int], *, mode: str = "RGB", color=(200, 30, 30), fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def open_bytes(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.mark.asyncio
async def test_decode_reports_dimensions() -> None:
    codec = PillowImageCodec()

    image = await codec.decode(make_image((320, 200)), "image/png")

    assert (image.width, image.height) == (320, 200)
    assert image.long_edge == 320
    assert image.content_type == "image/png"


@pytest.mark.asyncio
async def test_decode_rejects_garbage() -> None:
    with pytest.raises(ImageDecodeError):
        await PillowImageCodec().decode(b"not an image", "image/jpeg")


@pytest.mark.asyncio
async def test_encode_downscales_to_requested_size() -> None:
    codec = PillowImageCodec()
    image = await codec.decode(make_image((400, 300), fmt="JPEG"), "image/jpeg")

    data = await codec.encode(image, 200, 150, 0.8, "image/jpeg")

    encoded = open_bytes(data)
    assert encoded.format == "JPEG"
    assert encoded.size == (200, 150)


@pytest.mark.asyncio
async def test_encode_never_upscales() -> None:
    codec = PillowImageCodec()
    image = await codec.decode(make_image((120, 80)), "image/png")

    data = await codec.encode(image, 240, 160, 0.8, "image/jpeg")

    assert open_bytes(data).size == (120, 80)


@pytest.mark.asyncio
async def test_encode_flattens_alpha_for_jpeg() -> None:
    codec = PillowImageCodec()
    payload = make_image((64, 64), mode="RGBA", color=(0, 0, 255, 0))
    image = await codec.decode(payload, "image/png")

    data = await codec.encode(image, 64, 64, 0.9, "image/jpeg")

    encoded = open_bytes(data)
    assert encoded.mode == "RGB"
    red, green, blue = encoded.getpixel((32, 32))
    assert min(red, green, blue) >= 245


@pytest.mark.asyncio
async def test_encode_preserves_colour() -> None:
    codec = PillowImageCodec()
    image = await codec.decode(make_image((200, 100), color=(220, 20, 20)), "image/png")

    data = await codec.encode(image, 100, 50, 0.9, "image/jpeg")

    red, green, blue = open_bytes(data).getpixel((50, 25))
    assert abs(red - 220) <= 10
    assert green <= 35
    assert blue <= 35


@pytest.mark.asyncio
async def test_encode_webp_and_png_outputs() -> None:
    codec = PillowImageCodec()
    image = await codec.decode(make_image((50, 40)), "image/png")

    assert open_bytes(await codec.encode(image, 50, 40, 0.7, "image/webp")).format == "WEBP"
    assert open_bytes(await codec.encode(image, 25, 20, 0.7, "image/png")).format == "PNG"


@pytest.mark.asyncio
async def test_lower_quality_produces_smaller_jpeg() -> None:
    codec = PillowImageCodec()
    gradient = Image.linear_gradient("L").resize((512, 512)).convert("RGB")
    buffer = io.BytesIO()
    gradient.save(buffer, format="PNG")
    image = await codec.decode(buffer.getvalue(), "image/png")

    high = await codec.encode(image, 512, 512, 0.95, "image/jpeg")
    low = await codec.encode(image, 512, 512, 0.2, "image/jpeg")

    assert len(low) < len(high)


@pytest.mark.parametrize(("quality", "expected"), [(0.0, 1), (0.45, 45), (0.85, 85), (1.0, 95)])
def test_pillow_quality_mapping(quality: float, expected: int) -> None:
    assert pillow_quality(quality) == expected
