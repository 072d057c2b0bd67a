from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _split_origins(raw: str) -> List[str]:
	return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
	jobs_dir: Path = Path("jobs")
	catalog_path: Path = Path("catalog/comics.json")
	log_level: str = "INFO"
	cors_origins: List[str] = field(default_factory=lambda: ["*"])

	def __post_init__(self) -> None:
		self.jobs_dir = Path(self.jobs_dir)
		self.catalog_path = Path(self.catalog_path)
		self.log_level = self.log_level.upper()
		if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
			raise ValueError(f"Invalid log level: {self.log_level}")


def load_settings() -> Settings:
	"""Build settings from COMICSHELF_* environment variables."""
	return Settings(
		jobs_dir=Path(os.getenv("COMICSHELF_JOBS_DIR", "jobs")),
		catalog_path=Path(os.getenv("COMICSHELF_CATALOG_PATH", "catalog/comics.json")),
		log_level=os.getenv("COMICSHELF_LOG_LEVEL", "INFO"),
		cors_origins=_split_origins(os.getenv("COMICSHELF_CORS_ORIGINS", "*")),
	)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
	return load_settings()
