"""Image codecs used by the compressor."""

from .codec_base import ImageCodec
from .codec_pillow import PillowImageCodec

__all__ = ["ImageCodec", "PillowImageCodec"]
