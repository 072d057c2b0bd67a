from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from comicshelf.services import catalog_store
from comicshelf.services.covers import normalize_cover
from comicshelf.services.errors import CatalogError, IngestError, ValidationError
from comicshelf.services.filename_metadata import extract_metadata
from comicshelf.services.models import (
	BatchProgress,
	BatchResult,
	ItemFailure,
	ItemOutcome,
	ItemSuccess,
	RawItem,
)
from comicshelf.services.status_store import append_event, update_status, write_status

logger = logging.getLogger(__name__)

ACCEPTED_TYPES = ("image/jpeg", "image/png", "image/webp")
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

INVALID_TYPE_MESSAGE = "Invalid file type. Only JPG, PNG, and WebP are supported."
TOO_LARGE_MESSAGE = "File too large. Maximum size is 5MB."
NO_VALID_FILES_MESSAGE = "No valid image files found"

DEFAULT_CONDITION = "Near Mint"

PENDING = "pending"
PROCESSING = "processing"
SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class StatusEvent:
	index: int
	name: str
	status: str
	outcome: Optional[ItemOutcome] = None


StatusCallback = Callable[[StatusEvent], None]
ProgressCallback = Callable[[BatchProgress], None]
StoreCallback = Callable[[ItemSuccess], Any]


def is_image_type(content_type: str) -> bool:
	return (content_type or "").lower().startswith("image/")


def validate_item(item: RawItem) -> None:
	if (item.content_type or "").lower() not in ACCEPTED_TYPES:
		raise ValidationError(INVALID_TYPE_MESSAGE)
	if item.size_bytes > MAX_FILE_SIZE:
		raise ValidationError(TOO_LARGE_MESSAGE)


def process_item(item: RawItem) -> ItemOutcome:
	"""Normalize then extract one validated item; errors become a failure outcome."""
	try:
		images = normalize_cover(item.data)
		metadata = extract_metadata(item.name)
	except IngestError as e:
		return ItemFailure(source_name=item.name, reason=str(e))
	except Exception as e:
		logger.exception("Unexpected error while processing %s", item.name)
		return ItemFailure(source_name=item.name, reason=str(e) or "Unknown error occurred")
	return ItemSuccess(source_name=item.name, metadata=metadata, images=images)


def ingest(
	items: Iterable[RawItem],
	on_status: Optional[StatusCallback] = None,
	on_progress: Optional[ProgressCallback] = None,
	store: Optional[StoreCallback] = None,
) -> BatchResult:
	"""
	Run a batch strictly in input order, one item at a time.

	Every item moves pending -> processing -> success|error and yields exactly
	one outcome; a failed item never stops the batch. `store` receives each
	success before its terminal status; a CatalogError there fails that item
	only. When no item even claims to be an image the batch fails as a whole
	and no item is touched.
	"""
	items = list(items)

	def notify(event: StatusEvent) -> None:
		if on_status is not None:
			on_status(event)

	def report(progress: BatchProgress) -> None:
		if on_progress is not None:
			on_progress(progress)

	if not any(is_image_type(i.content_type) for i in items):
		logger.warning("Batch of %d file(s) rejected: %s", len(items), NO_VALID_FILES_MESSAGE)
		return BatchResult(error=NO_VALID_FILES_MESSAGE)

	total = len(items)
	result = BatchResult(progress=BatchProgress(0, total))
	report(result.progress)
	for idx, item in enumerate(items):
		notify(StatusEvent(idx, item.name, PENDING))

	for idx, item in enumerate(items):
		notify(StatusEvent(idx, item.name, PROCESSING))
		try:
			validate_item(item)
		except ValidationError as e:
			outcome: ItemOutcome = ItemFailure(source_name=item.name, reason=str(e))
		else:
			outcome = process_item(item)

		if isinstance(outcome, ItemSuccess) and store is not None:
			try:
				store(outcome)
			except CatalogError as e:
				outcome = ItemFailure(source_name=item.name, reason=str(e))

		result.outcomes.append(outcome)
		if isinstance(outcome, ItemSuccess):
			logger.info("Processed %s (%d/%d)", item.name, idx + 1, total)
			notify(StatusEvent(idx, item.name, SUCCESS, outcome))
		else:
			logger.warning("Failed %s: %s", item.name, outcome.reason)
			notify(StatusEvent(idx, item.name, ERROR, outcome))

		result.progress = BatchProgress(idx + 1, total)
		report(result.progress)

	return result


def to_catalog_record(success: ItemSuccess, condition: str = DEFAULT_CONDITION) -> Dict[str, Any]:
	md = success.metadata
	return {
		"series": md.series,
		"title": md.title,
		"issueNumber": md.issue_number,
		"coverPrice": float(md.cover_price),
		"publicationDate": md.publication_date,
		"publisher": md.publisher,
		"coverImage": success.images.full,
		"previewImage": success.images.preview,
		"condition": condition,
		"creators": {"writers": [], "artists": [], "coverArtists": []},
	}


def items_from_files_meta(files_meta: List[Dict[str, Any]]) -> List[RawItem]:
	out = []
	for fm in files_meta:
		data = fm["data"]
		out.append(RawItem(
			data=data,
			name=Path(fm["filename"]).name,
			content_type=fm.get("content_type") or "",
			size=fm.get("size", len(data)),
		))
	return out


def ingest_and_store(
	items: Iterable[RawItem],
	catalog_path: Optional[Path] = None,
	on_status: Optional[StatusCallback] = None,
	on_progress: Optional[ProgressCallback] = None,
) -> BatchResult:
	"""Ingest a batch and add each successful item to the catalog as soon as it finishes."""

	def store(success: ItemSuccess) -> None:
		catalog_store.add_record(to_catalog_record(success), catalog_path)

	return ingest(items, on_status=on_status, on_progress=on_progress, store=store)


def run_ingest_job(job_id: str, files_meta: List[Dict[str, Any]]) -> None:
	try:
		items = items_from_files_meta(files_meta)
		write_status(job_id, {
			"job_id": job_id,
			"status": "processing",
			"step": "Process Covers",
			"progress": {"completed": 0, "total": 0},
			"items": [],
			"events": [],
		})

		def on_status(event: StatusEvent) -> None:
			extra: Dict[str, Any] = {"index": event.index}
			if isinstance(event.outcome, ItemSuccess):
				extra["preview"] = event.outcome.images.preview
			elif isinstance(event.outcome, ItemFailure):
				extra["error"] = event.outcome.reason
			append_event(job_id, event.name, event.status, **extra)

		def on_progress(progress: BatchProgress) -> None:
			update_status(job_id, progress={"completed": progress.completed, "total": progress.total})

		result = ingest_and_store(items, on_status=on_status, on_progress=on_progress)

		if result.error:
			update_status(job_id, status="error", step="Done", error=result.error, failures=result.failures)
			return
		update_status(
			job_id,
			status="completed",
			step="Done",
			progress={"completed": result.progress.completed, "total": result.progress.total},
			succeeded=len(result.successes),
			failures=result.failures,
		)
	except Exception as e:
		logger.exception("Ingest job %s failed", job_id)
		write_status(job_id, {"job_id": job_id, "status": "error", "error": str(e)})
