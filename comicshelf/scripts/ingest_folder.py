from __future__ import annotations

import argparse
import json
import logging
import mimetypes
from pathlib import Path
from typing import List, Optional

from comicshelf.config import get_settings
from comicshelf.services.ingest_pipeline import ingest_and_store
from comicshelf.services.models import BatchProgress, RawItem

logger = logging.getLogger(__name__)

mimetypes.add_type("image/webp", ".webp")


def list_files(folder: Path) -> List[Path]:
	return sorted(p for p in folder.iterdir() if p.is_file() and not p.name.startswith("."))


def guess_content_type(path: Path) -> str:
	content_type, _ = mimetypes.guess_type(path.name)
	return content_type or "application/octet-stream"


def load_items(folder: Path) -> List[RawItem]:
	items = []
	for p in list_files(folder):
		data = p.read_bytes()
		items.append(RawItem(data=data, name=p.name, content_type=guess_content_type(p), size=len(data)))
	return items


def ingest_folder(input_dir: Path, catalog_path: Optional[Path] = None, report_path: Optional[Path] = None) -> int:
	input_dir = input_dir.resolve()
	if not input_dir.is_dir():
		raise SystemExit(f"Not a folder: {input_dir}")

	def on_progress(progress: BatchProgress) -> None:
		if progress.total:
			print(f"Processing {progress.completed} of {progress.total} images...")

	result = ingest_and_store(load_items(input_dir), catalog_path=catalog_path, on_progress=on_progress)

	for failure in result.failures:
		print(f"{failure['filename']}: {failure['error']}")

	if report_path is not None:
		report = {
			"input": str(input_dir),
			"completed": result.progress.completed,
			"total": result.progress.total,
			"succeeded": [s.source_name for s in result.successes],
			"failures": result.failures,
		}
		report_path.parent.mkdir(parents=True, exist_ok=True)
		report_path.write_text(json.dumps(report, indent=2), encoding="utf-8")

	if result.error:
		return 1
	logger.info("Ingested %d of %d file(s) from %s", len(result.successes), result.progress.total, input_dir)
	return 0


def main(argv: Optional[List[str]] = None) -> int:
	parser = argparse.ArgumentParser(description="Ingest a folder of comic cover scans into the catalog")
	parser.add_argument("--input", required=True, help="Folder containing cover images")
	parser.add_argument("--catalog", help="Catalog JSON file (default: COMICSHELF_CATALOG_PATH)")
	parser.add_argument("--report", help="Optional path for a JSON report of the batch")
	args = parser.parse_args(argv)

	logging.basicConfig(
		level=get_settings().log_level,
		format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
	)

	return ingest_folder(
		Path(args.input),
		catalog_path=Path(args.catalog) if args.catalog else None,
		report_path=Path(args.report) if args.report else None,
	)


if __name__ == "__main__":
	raise SystemExit(main())
