"""Tests for JSON and CSV exporters."""

import csv
import io
import json
from datetime import date
from pathlib import Path

from leadscout.exporter import (
    CSV_COLUMNS,
    candidate_to_row,
    export_csv,
    export_json,
    leads_filename,
)
from leadscout.models import LeadCandidate, RunResult, count_tiers


class TestCandidateToRow:
    """Tests for candidate_to_row function."""

    def test_row_basic(self, sample_candidate: LeadCandidate) -> None:
        """Test converting a candidate to a CSV row."""
        row = candidate_to_row(sample_candidate)

        assert row["company_name"] == "Maple Frame Studio"
        assert row["domain"] == "mapleframe.ca"
        assert row["us_review_required"] == "no"
        assert row["emails"] == "hello@mapleframe.ca"
        assert row["video_keywords"] == "webinar; podcast; training; video"

    def test_missing_links_are_blank(self, bare_candidate: LeadCandidate) -> None:
        """Test that absent contact routes become empty strings."""
        row = candidate_to_row(bare_candidate)
        assert row["contact_page_url"] == ""
        assert row["demo_booking_url"] == ""

    def test_all_columns(self, sample_candidate: LeadCandidate) -> None:
        """Test that every CSV column is present."""
        row = candidate_to_row(sample_candidate)
        assert list(row) == CSV_COLUMNS


class TestExportCsv:
    """Tests for export_csv function."""

    def test_export_to_stringio(self, sample_candidate: LeadCandidate) -> None:
        """Test exporting to a StringIO object."""
        output = io.StringIO()
        count = export_csv([sample_candidate], output)

        assert count == 1
        output.seek(0)
        rows = list(csv.DictReader(output))
        assert len(rows) == 1
        assert rows[0]["company_url"] == "https://mapleframe.ca"

    def test_export_to_file(self, sample_candidate: LeadCandidate, tmp_path: Path) -> None:
        """Test exporting to a file, creating parent directories."""
        path = tmp_path / "out" / "leads.csv"
        assert export_csv([sample_candidate], path) == 1

        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames == CSV_COLUMNS
            assert len(list(reader)) == 1

    def test_empty_export_has_header(self) -> None:
        """Test that an empty export still writes the header."""
        output = io.StringIO()
        assert export_csv([], output) == 0
        assert output.getvalue().strip() == ",".join(CSV_COLUMNS)


class TestExportJson:
    """Tests for export_json function."""

    def test_metadata_and_candidates(
        self, sample_candidate: LeadCandidate, bare_candidate: LeadCandidate, tmp_path: Path
    ) -> None:
        """Test the metadata block and candidate list."""
        scored = sample_candidate.model_copy(update={"tier": "A", "score": 90})
        skipped = bare_candidate.model_copy(update={"tier": "SKIP"})
        path = tmp_path / "leads.json"

        assert export_json([scored, skipped], path) == 2

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["metadata"]["total_candidates"] == 2
        assert data["metadata"]["tiers"] == {"A": 1, "B": 0, "C": 0, "SKIP": 1}
        assert data["candidates"][0]["company_name"] == "Maple Frame Studio"
        assert data["candidates"][0]["score"] == 90

    def test_tiers_match_run_result(
        self, sample_candidate: LeadCandidate, tmp_path: Path
    ) -> None:
        """Test that exported tier counts agree with the run summary."""
        candidates = [
            sample_candidate.model_copy(update={"tier": tier}) for tier in ("B", "B", "C")
        ]
        path = tmp_path / "leads.json"

        export_json(candidates, path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["metadata"]["tiers"] == RunResult(candidates=candidates).tier_counts()
        assert data["metadata"]["tiers"] == count_tiers(candidates)


def test_leads_filename() -> None:
    """Test the dated export filename."""
    assert leads_filename("csv", date(2024, 3, 1)) == "leads-2024-03-01.csv"
    assert leads_filename("json").startswith("leads-")
