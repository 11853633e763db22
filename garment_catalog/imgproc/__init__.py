"""Image decoding, normalisation and compression."""

from .normalize import (
    ImageNormalizer,
    compress_image,
    decode_data_url,
    encode_data_url,
    make_thumbnail_data_url,
)

__all__ = [
    "ImageNormalizer",
    "compress_image",
    "decode_data_url",
    "encode_data_url",
    "make_thumbnail_data_url",
]
