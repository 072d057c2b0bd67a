from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Union

# filename reported for batch-level (not per-item) failures
BATCH_FAILURE_NAME = "Upload"

@dataclass(frozen=True)
class RawItem:
	"""An uploaded file plus its declared name, type and size."""

	data: bytes
	name: str
	content_type: str
	size: Optional[int] = None

	@property
	def size_bytes(self) -> int:
		return len(self.data) if self.size is None else int(self.size)


@dataclass(frozen=True)
class ExtractedMetadata:
	series: str
	title: str
	issue_number: int
	cover_price: Decimal
	publication_date: str
	publisher: str


@dataclass(frozen=True)
class NormalizedImagePair:
	preview: str
	full: str
	preview_size: Tuple[int, int]
	full_size: Tuple[int, int]


@dataclass(frozen=True)
class ItemSuccess:
	source_name: str
	metadata: ExtractedMetadata
	images: NormalizedImagePair

	ok = True


@dataclass(frozen=True)
class ItemFailure:
	source_name: str
	reason: str

	ok = False


ItemOutcome = Union[ItemSuccess, ItemFailure]


@dataclass(frozen=True)
class BatchProgress:
	completed: int
	total: int


@dataclass
class BatchResult:
	outcomes: List[ItemOutcome] = field(default_factory=list)
	progress: BatchProgress = field(default_factory=lambda: BatchProgress(0, 0))
	error: Optional[str] = None

	@property
	def failures(self) -> List[Dict[str, str]]:
		if self.error:
			return [{"filename": BATCH_FAILURE_NAME, "error": self.error}]
		return [{"filename": o.source_name, "error": o.reason} for o in self.outcomes if isinstance(o, ItemFailure)]

	@property
	def successes(self) -> List[ItemSuccess]:
		return [o for o in self.outcomes if isinstance(o, ItemSuccess)]
