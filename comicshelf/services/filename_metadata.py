"""
Filename metadata extraction for comic cover scans.

Names such as ``Amazing-Spider-Man_129_(1973)_$0.20.jpg`` are parsed by a
short chain of matchers applied left to right:

    series -> issue -> title -> (year) -> $price

Price and year are peeled off the end first, then series and issue are
matched from the front and whatever is left becomes the title. A name
without a series/issue match falls back to defaults for every field.
"""
from __future__ import annotations

import logging
import re
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from comicshelf.services.models import ExtractedMetadata

logger = logging.getLogger(__name__)

COMMON_PUBLISHERS = [
	"Marvel",
	"DC Comics",
	"Image Comics",
	"Dark Horse",
	"IDW",
	"Vertigo",
	"Boom! Studios",
]

DEFAULT_SERIES = "Unknown Series"
DEFAULT_PUBLISHER = "Unknown Publisher"

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_SEPARATORS_RE = re.compile(r"[_-]")
_PRICE_RE = re.compile(r"\s+\$(\d+\.\d{2}|\d+)$")
_YEAR_RE = re.compile(r"\s+\((\d{4})\)$")
_SERIES_ISSUE_RE = re.compile(r"^(.*?)(?:\s+|#)(\d+)(?=\s|$)")


def clean_filename(filename: str) -> str:
	stem = _EXTENSION_RE.sub("", filename)
	return _SEPARATORS_RE.sub(" ", stem)


def split_price(text: str) -> Tuple[str, Optional[str]]:
	m = _PRICE_RE.search(text)
	if not m:
		return text, None
	return text[:m.start()], m.group(1)


def split_year(text: str) -> Tuple[str, Optional[str]]:
	m = _YEAR_RE.search(text)
	if not m:
		return text, None
	return text[:m.start()], m.group(1)


def match_series_issue(text: str) -> Optional[Tuple[str, int, str]]:
	"""Return (raw series, issue number, title) or None when no issue token is found."""
	m = _SERIES_ISSUE_RE.match(text)
	if not m:
		return None
	return m.group(1), int(m.group(2)), text[m.end():].strip()


def format_series(series: str) -> str:
	words = [w[:1].upper() + w[1:].lower() for w in series.split(" ")]
	return " ".join(words).strip()


def format_date(year: Optional[str], today: Optional[date] = None) -> str:
	if not year:
		return (today or date.today()).isoformat()
	return f"{year}-01-01"


def detect_publisher(series: str) -> str:
	upper = series.upper()
	for publisher in COMMON_PUBLISHERS:
		if publisher.upper() in upper:
			return publisher
	return DEFAULT_PUBLISHER


def extract_metadata(filename: str, today: Optional[date] = None) -> ExtractedMetadata:
	name = clean_filename(filename)
	rest, price = split_price(name)
	rest, year = split_year(rest)
	parsed = match_series_issue(rest)

	if parsed is None:
		# nothing usable: keep every field at its default
		logger.debug("No series/issue found in %r, using defaults", filename)
		return ExtractedMetadata(
			series=DEFAULT_SERIES,
			title="",
			issue_number=0,
			cover_price=Decimal("0"),
			publication_date=format_date(None, today),
			publisher=DEFAULT_PUBLISHER,
		)

	raw_series, issue, title = parsed
	return ExtractedMetadata(
		series=format_series(raw_series) or DEFAULT_SERIES,
		title=title,
		issue_number=issue,
		cover_price=Decimal(price) if price else Decimal("0"),
		publication_date=format_date(year, today),
		publisher=detect_publisher(raw_series),
	)
