from __future__ import annotations


class ComicShelfError(Exception):
	"""Base class for all ComicShelf errors."""


class IngestError(ComicShelfError):
	"""Base class for per-item ingestion failures."""


class ValidationError(IngestError):
	"""Declared type or size rejected before any decoding."""


class DecodeError(IngestError):
	"""Bytes could not be decoded as a raster image."""


class CatalogError(ComicShelfError):
	"""The catalog blob could not be read or written."""


class CatalogImportError(CatalogError):
	"""An import file is not a JSON list of records."""
