from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from comicshelf.config import get_settings


def _status_path(job_id: str) -> Path:
	jobs_dir = get_settings().jobs_dir
	jobs_dir.mkdir(parents=True, exist_ok=True)
	return jobs_dir / f"{job_id}.json"


def write_status(job_id: str, data: Dict[str, Any]) -> None:
	with _status_path(job_id).open("w", encoding="utf-8") as f:
		json.dump(data, f, indent=2)


def read_status(job_id: str) -> Dict[str, Any]:
	status_path = _status_path(job_id)
	if not status_path.exists():
		return {"job_id": job_id, "status": "unknown"}
	with status_path.open("r", encoding="utf-8") as f:
		return json.load(f)


def update_status(job_id: str, **fields: Any) -> Dict[str, Any]:
	data = read_status(job_id)
	data.update(fields)
	write_status(job_id, data)
	return data


def append_event(job_id: str, name: str, status: str, **extra: Any) -> None:
	"""Record an item status transition and mirror it onto the job's item list."""
	data = read_status(job_id)
	data.setdefault("events", []).append({"name": name, "status": status})
	items = data.setdefault("items", [])
	index = extra.pop("index", None)
	if index is not None and index < len(items):
		items[index].update({"status": status, **extra})
	else:
		items.append({"name": name, "status": status, **extra})
	write_status(job_id, data)
