from __future__ import annotations

import base64
from io import BytesIO
from typing import Dict, List, Tuple

from PIL import ExifTags, Image

Size = Tuple[int, int]

_T = Image.Transpose
# EXIF orientation -> transposes that bring the pixels upright
_ORIENTATION_OPS: Dict[int, List[Image.Transpose]] = {
	2: [_T.FLIP_LEFT_RIGHT],
	3: [_T.ROTATE_180],
	4: [_T.FLIP_TOP_BOTTOM],
	5: [_T.FLIP_LEFT_RIGHT, _T.ROTATE_90],
	6: [_T.ROTATE_270],
	7: [_T.FLIP_LEFT_RIGHT, _T.ROTATE_270],
	8: [_T.ROTATE_90],
}


def exif_orientation(img: Image.Image) -> int:
	exif = img.getexif()
	for tag_id, value in exif.items():
		if ExifTags.TAGS.get(tag_id) == "Orientation":
			try:
				return int(value)
			except (TypeError, ValueError):
				return 1
	return 1


def apply_exif_orientation(img: Image.Image) -> Image.Image:
	for op in _ORIENTATION_OPS.get(exif_orientation(img), []):
		img = img.transpose(op)
	return img


def to_rgb(img: Image.Image, background: Tuple[int, int, int] = (255, 255, 255)) -> Image.Image:
	"""Flatten to RGB; transparent pixels land on `background`."""
	if img.mode == "RGB":
		return img
	if img.mode == "P" and "transparency" in img.info:
		img = img.convert("RGBA")
	if img.mode in ("RGBA", "LA"):
		rgba = img.convert("RGBA")
		flat = Image.new("RGB", rgba.size, background)
		flat.paste(rgba, mask=rgba.getchannel("A"))
		return flat
	return img.convert("RGB")


def _scaled(side: int, ratio: float) -> int:
	return max(1, int(round(side * ratio)))


def scale_to_longest(size: Size, cap: int) -> Size:
	"""Shrink so the longer side equals `cap`; smaller images are left alone."""
	w, h = size
	longest = max(w, h)
	if longest <= cap:
		return (w, h)
	ratio = cap / float(longest)
	if w >= h:
		return (cap, min(cap, _scaled(h, ratio)))
	return (min(cap, _scaled(w, ratio)), cap)


def fit_within(size: Size, max_w: int, max_h: int) -> Size:
	"""Shrink by the single most restrictive ratio so both caps hold."""
	w, h = size
	ratio = min(1.0, max_w / float(w), max_h / float(h))
	if ratio >= 1.0:
		return (w, h)
	return (min(max_w, _scaled(w, ratio)), min(max_h, _scaled(h, ratio)))


def encode_jpeg_data_url(img: Image.Image, quality: int) -> str:
	buf = BytesIO()
	img.save(buf, format="JPEG", quality=quality, optimize=True)
	return "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def decode_data_url(data_url: str) -> bytes:
	_, _, payload = data_url.partition(",")
	return base64.b64decode(payload)
