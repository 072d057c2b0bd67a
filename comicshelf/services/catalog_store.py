"""
Local catalog blob: every record lives in one JSON list on disk.
"""
from __future__ import annotations

import json
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from comicshelf.config import get_settings
from comicshelf.services.errors import CatalogError, CatalogImportError

# upload jobs run in the server threadpool; writes are read-modify-write
_write_lock = threading.Lock()


def _catalog_path(path: Optional[Path] = None) -> Path:
	return Path(path) if path is not None else get_settings().catalog_path


def load_records(path: Optional[Path] = None) -> List[Dict[str, Any]]:
	p = _catalog_path(path)
	if not p.exists():
		return []
	with p.open("r", encoding="utf-8") as f:
		return json.load(f)


def _save_records(records: List[Dict[str, Any]], path: Optional[Path] = None) -> None:
	p = _catalog_path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	with p.open("w", encoding="utf-8") as f:
		json.dump(records, f, indent=2)


def add_record(record: Dict[str, Any], path: Optional[Path] = None) -> Dict[str, Any]:
	stored = {**record, "id": str(uuid.uuid4())}
	with _write_lock:
		try:
			records = load_records(path)
			if not isinstance(records, list):
				raise ValueError("catalog is not a list of records")
			records.append(stored)
			_save_records(records, path)
		except (OSError, ValueError) as e:
			raise CatalogError(f"Failed to save to catalog: {e}") from e
	return stored


def export_records(path: Optional[Path] = None) -> str:
	return json.dumps(load_records(path), indent=2)


def import_records(text: str, path: Optional[Path] = None) -> List[Dict[str, Any]]:
	"""Replace the whole catalog with the records in `text`."""
	try:
		records = json.loads(text)
	except json.JSONDecodeError as e:
		raise CatalogImportError("Invalid import file") from e
	if not isinstance(records, list):
		raise CatalogImportError("Invalid import file")
	with _write_lock:
		_save_records(records, path)
	return records
