"""Unit tests for paper_registry.models.records (pydantic models)."""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from paper_registry.models.records import (
    DisplayMetrics,
    PaperRecord,
    RankingRow,
    ResolvedMatch,
    WorkMetadata,
)


class TestWorkMetadata:
    def test_issn_candidates_become_tuple(self):
        work = WorkMetadata(
            doi="10.1/x", title="T", container_title="J", issn_candidates=["1", "2"], year=2020
        )
        assert work.issn_candidates == ("1", "2")

    def test_issn_candidates_default_empty(self):
        work = WorkMetadata(doi="10.1/x", title="T", container_title="J", year=2020)
        assert work.issn_candidates == ()

    def test_frozen(self):
        work = WorkMetadata(doi="10.1/x", title="T", container_title="J", year=2020)
        with pytest.raises(ValidationError):
            work.title = "changed"


class TestRankingRow:
    def test_float_impact_factor_keeps_printed_value(self):
        row = RankingRow(issn="1234-5678", impact_factor=7.1)
        assert row.impact_factor == Decimal("7.1")

    def test_decimal_and_string_impact_factor(self):
        assert RankingRow(issn="x", impact_factor=Decimal("49.962")).impact_factor == Decimal("49.962")
        assert RankingRow(issn="x", impact_factor="2.5").impact_factor == Decimal("2.5")

    @pytest.mark.parametrize("value", [None, "", "N/A", "na", "  "])
    def test_missing_impact_factor(self, value):
        assert RankingRow(issn="x", impact_factor=value).impact_factor is None

    def test_rows_are_hashable(self):
        a = RankingRow(issn="1234-5678", impact_factor=2.5, category="A")
        b = RankingRow(issn="1234-5678", impact_factor=2.5, category="A")
        assert len({a, b}) == 1


class TestResolvedMatch:
    def test_matched(self):
        assert ResolvedMatch(row=RankingRow(issn="x")).matched is True
        assert ResolvedMatch().matched is False


class TestPaperRecord:
    def test_defaults_are_sentinels(self):
        record = PaperRecord(doi="10.1/x", title="T", journal="J", year=2020)
        assert record.impact_factor == "N/A"
        assert record.percentile == "N/A"
        assert record.id is None
        assert record.created_at is None

    def test_doi_required(self):
        with pytest.raises(ValidationError):
            PaperRecord(doi="   ", title="T", journal="J", year=2020)

    def test_insert_params_exclude_store_fields(self):
        record = PaperRecord(id=3, doi="10.1/x", title="T", journal="J", year=2020)
        params = record.to_insert_params()
        assert "id" not in params
        assert "created_at" not in params
        assert params["doi"] == "10.1/x"


def test_display_metrics_default_to_not_available():
    display = DisplayMetrics()
    assert display.impact_factor == "N/A"
    assert display.percentile == "N/A"
