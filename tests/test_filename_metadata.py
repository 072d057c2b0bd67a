"""Filename metadata extraction."""

from datetime import date
from decimal import Decimal

import pytest

from comicshelf.services.filename_metadata import (
	clean_filename,
	detect_publisher,
	extract_metadata,
	format_series,
	match_series_issue,
	split_price,
	split_year,
)

TODAY = date(2024, 5, 1)


def test_amazing_spider_man_scenario():
	md = extract_metadata("Amazing-Spider-Man_129_(1973)_$0.20.jpg", today=TODAY)
	assert md.series == "Amazing Spider Man"
	assert md.issue_number == 129
	assert md.publication_date == "1973-01-01"
	assert md.cover_price == Decimal("0.20")
	assert md.title == ""
	assert md.publisher == "Unknown Publisher"


@pytest.mark.parametrize(
	"filename, series, issue, year, price",
	[
		("batman #404 (1987) $0.75.png", "Batman", 404, "1987", "0.75"),
		("the walking dead #1 (2003) $2.99.jpg", "The Walking Dead", 1, "2003", "2.99"),
		("HELLBOY #5 (1994) $3.webp", "Hellboy", 5, "1994", "3"),
	],
)
def test_full_pattern_recovers_every_field(filename, series, issue, year, price):
	md = extract_metadata(filename, today=TODAY)
	assert md.series == series
	assert md.issue_number == issue
	assert md.publication_date == f"{year}-01-01"
	assert md.cover_price == Decimal(price)


@pytest.mark.parametrize(
	"filename",
	["cover scan.jpg", "Spawn (1992) $1.95.jpg", "Batman 12abc.jpg", "", "untitled"],
)
def test_no_issue_token_falls_back_to_defaults(filename):
	md = extract_metadata(filename, today=TODAY)
	assert md.series == "Unknown Series"
	assert md.issue_number == 0
	assert md.title == ""
	assert md.cover_price == Decimal("0")
	assert md.publication_date == "2024-05-01"
	assert md.publisher == "Unknown Publisher"


def test_missing_year_uses_today():
	md = extract_metadata("Saga 12.jpg", today=TODAY)
	assert md.publication_date == "2024-05-01"


def test_title_between_issue_and_year():
	md = extract_metadata("Saga_12_The War for Phang_(2013)_$2.99.jpg", today=TODAY)
	assert md.series == "Saga"
	assert md.issue_number == 12
	assert md.title == "The War for Phang"
	assert md.publication_date == "2013-01-01"


def test_hash_without_space_marks_issue():
	md = extract_metadata("Batman#5.jpg", today=TODAY)
	assert md.series == "Batman"
	assert md.issue_number == 5


def test_first_standalone_number_is_the_issue():
	md = extract_metadata("Action Comics 1 2 3.jpg", today=TODAY)
	assert md.series == "Action Comics"
	assert md.issue_number == 1
	assert md.title == "2 3"

	md = extract_metadata("2000 AD 1234.jpg", today=TODAY)
	assert md.series == "2000 Ad"
	assert md.issue_number == 1234


def test_publisher_detected_from_raw_series():
	assert extract_metadata("Marvel-Team-Up_5.jpg").publisher == "Marvel"
	md = extract_metadata("dc-comics-presents_26_(1980).jpg")
	assert md.publisher == "DC Comics"
	assert md.series == "Dc Comics Presents"


def test_publisher_first_match_in_list_order():
	# contains both "Marvel" and "IDW"; Marvel comes first in the list
	assert detect_publisher("idw marvel crossover") == "Marvel"
	assert detect_publisher("boom! studios sampler") == "Boom! Studios"
	assert detect_publisher("") == "Unknown Publisher"


def test_extract_is_deterministic():
	name = "X-Men_141_Days of Future Past_(1981)_$0.50.jpg"
	assert extract_metadata(name, today=TODAY) == extract_metadata(name, today=TODAY)


def test_clean_filename():
	assert clean_filename("my.comic_file-name.jpeg") == "my.comic file name"
	assert clean_filename("no_extension") == "no extension"


def test_split_price_and_year():
	assert split_price("X 1 $0.20") == ("X 1", "0.20")
	assert split_price("X 1 $12") == ("X 1", "12")
	assert split_price("X 1 $0.2") == ("X 1 $0.2", None)
	assert split_year("X 1 (1999)") == ("X 1", "1999")
	assert split_year("X 1 (99)") == ("X 1 (99)", None)


def test_match_series_issue():
	assert match_series_issue("Daredevil 181 Last Hand") == ("Daredevil", 181, "Last Hand")
	assert match_series_issue("Daredevil") is None


def test_format_series():
	assert format_series("aMAZING spider-MAN") == "Amazing Spider-man"
	assert format_series("batman ") == "Batman"
