"""Tests for date normalization."""

import pytest

from relation_radar.dates import extract_date, normalize, parse_date
from relation_radar.errors import InvalidDateError


class TestNormalize:
    def test_dotted_with_hint(self) -> None:
        assert normalize("15.01.2020", "DD.MM.YYYY") == "2020-01-15"

    def test_turkish_month_name(self) -> None:
        assert normalize("15 Ocak 2020") == "2020-01-15"

    def test_garbage_is_unknown(self) -> None:
        assert normalize("garbage") is None

    def test_none_and_empty(self) -> None:
        assert normalize(None) is None
        assert normalize("") is None

    def test_iso(self) -> None:
        assert normalize("2021-03-09") == "2021-03-09"

    def test_iso_with_time(self) -> None:
        assert normalize("2021-03-09T10:15:00Z") == "2021-03-09"

    def test_slashes_and_dashes(self) -> None:
        assert normalize("05/11/2019") == "2019-11-05"
        assert normalize("05-11-2019") == "2019-11-05"

    def test_month_name_with_diacritics(self) -> None:
        assert normalize("3 Ağustos 2018") == "2018-08-03"
        assert normalize("21 EYLÜL 2017") == "2017-09-21"
        assert normalize("1 Şubat 2016") == "2016-02-01"

    def test_english_month_name(self) -> None:
        assert normalize("7 March 2022") == "2022-03-07"

    def test_surrounding_text(self) -> None:
        assert normalize("Güncelleme: 12.06.2023 - 14:05") == "2023-06-12"

    def test_out_of_range_components(self) -> None:
        assert normalize("32.13.2020") is None
        assert normalize("30.02.2020") is None

    def test_unknown_month_name(self) -> None:
        assert normalize("15 Foo 2020") is None

    def test_unsupported_hint_falls_back(self) -> None:
        assert normalize("15.01.2020", "MM/DD/YY") == "2020-01-15"

    def test_slash_hint(self) -> None:
        assert normalize("15/01/2020", "DD/MM/YYYY") == "2020-01-15"


def test_parse_date_raises_invalid_date_error() -> None:
    with pytest.raises(InvalidDateError):
        parse_date("no date here")


def test_invalid_date_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_date("")


class TestExtractDate:
    def test_finds_byline_date(self) -> None:
        text = "# Başlık\n\nYayınlanma: 15 Ocak 2020\n\nHaber metni..."
        assert extract_date(text) == "2020-01-15"

    def test_prefers_byline_over_iso_in_asset_url(self) -> None:
        text = "![img](https://cdn.example/2019-05-03/photo.jpg)\n\nYayınlanma: 15.01.2020"
        assert extract_date(text) == "2020-01-15"

    def test_dashed_day_first(self) -> None:
        assert extract_date("Güncelleme 03-02-2021 10:15") == "2021-02-03"

    def test_iso_used_when_nothing_else_matches(self) -> None:
        assert extract_date("Published 2021-06-02T08:00:00Z") == "2021-06-02"

    def test_invalid_day_first_falls_through(self) -> None:
        assert extract_date("31.02.2020 ... 1 Mart 2020") == "2020-03-01"

    def test_ignores_dates_beyond_window(self) -> None:
        text = "x" * 50 + " 01.02.2020"
        assert extract_date(text, window=20) is None

    def test_empty(self) -> None:
        assert extract_date(None) is None
        assert extract_date("") is None
