from __future__ import annotations

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from comicshelf.services.errors import DecodeError
from comicshelf.services.image_utils import (
	apply_exif_orientation,
	encode_jpeg_data_url,
	fit_within,
	scale_to_longest,
	to_rgb,
)
from comicshelf.services.models import NormalizedImagePair

PREVIEW_MAX_SIZE = 200
PREVIEW_QUALITY = 70

FULL_MAX_WIDTH = 1200
FULL_MAX_HEIGHT = 1800
FULL_QUALITY = 85


def decode_cover(raw: bytes) -> Image.Image:
	"""Decode raw bytes into an upright RGB image, or raise DecodeError."""
	try:
		img = Image.open(BytesIO(raw))
		img.load()
	except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
		raise DecodeError("Failed to process image") from e
	img = apply_exif_orientation(img)
	return to_rgb(img)


def _resample(img: Image.Image, size) -> Image.Image:
	if img.size == tuple(size):
		return img
	return img.resize(size, Image.Resampling.LANCZOS)


def normalize_cover(raw: bytes) -> NormalizedImagePair:
	"""
	Decode once and resample twice: a preview whose longer side is capped at
	200px and a full image that fits within 1200x1800.
	"""
	img = decode_cover(raw)

	preview = _resample(img, scale_to_longest(img.size, PREVIEW_MAX_SIZE))
	full = _resample(img, fit_within(img.size, FULL_MAX_WIDTH, FULL_MAX_HEIGHT))

	return NormalizedImagePair(
		preview=encode_jpeg_data_url(preview, PREVIEW_QUALITY),
		full=encode_jpeg_data_url(full, FULL_QUALITY),
		preview_size=preview.size,
		full_size=full.size,
	)
