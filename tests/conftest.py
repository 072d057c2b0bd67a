from io import BytesIO

import pytest
from PIL import Image

from comicshelf.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
	"""Point job status and catalog files at a per-test temp dir."""
	monkeypatch.setenv("COMICSHELF_JOBS_DIR", str(tmp_path / "jobs"))
	monkeypatch.setenv("COMICSHELF_CATALOG_PATH", str(tmp_path / "catalog" / "comics.json"))
	get_settings.cache_clear()
	yield get_settings()
	get_settings.cache_clear()


@pytest.fixture
def image_bytes():
	def _make(size=(300, 450), fmt="JPEG", mode="RGB", color=(200, 30, 30), exif=None):
		img = Image.new(mode, size, color)
		buf = BytesIO()
		kwargs = {}
		if exif is not None:
			kwargs["exif"] = exif
		img.save(buf, format=fmt, **kwargs)
		return buf.getvalue()

	return _make
