"""Tests for pulse.cli."""

import pytest
from click.testing import CliRunner

from pulse.cli import main
from pulse.store.duck_store import DuckStore


@pytest.fixture
def csv_dir(tmp_path):
    d = tmp_path / "raw"
    d.mkdir()
    (d / "visits.csv").write_text(
        "mrn,age,sex\n"
        "1001,34,M\n"
        "1002,999,F\n"
        ",51,F\n"
        "1004,28,M\n"
    )
    return d


def _profile(runner, csv_dir, db, *extra):
    return runner.invoke(main, [
        "profile", "--csv-dir", str(csv_dir), "--db", str(db), "--ingest-id", "ing1", *extra,
    ])


# ── profile ──────────────────────────────────────────────────────────

class TestProfileCommand:
    def test_profiles_csv_directory(self, tmp_path, csv_dir):
        db = tmp_path / "results.db"
        result = _profile(CliRunner(), csv_dir, db)
        assert result.exit_code == 0, result.output
        assert "1 table(s)" in result.output

        store = DuckStore(db)
        try:
            (summary,) = store.fetch_summaries("ing1", "raw")
            assert summary["table_name"] == "visits"
            assert summary["critical_issue_count"] == 1
            assert store.count_rows("data_profile", "ing1", "raw") == 3
        finally:
            store.close()

    def test_rerun_replaces_results(self, tmp_path, csv_dir):
        db = tmp_path / "results.db"
        runner = CliRunner()
        assert _profile(runner, csv_dir, db).exit_code == 0
        assert _profile(runner, csv_dir, db).exit_code == 0
        store = DuckStore(db)
        try:
            assert store.count_rows("data_profile_summary", "ing1", "raw") == 1
        finally:
            store.close()

    def test_config_file(self, tmp_path, csv_dir):
        cfg = tmp_path / "profiling.yaml"
        cfg.write_text("identifier_columns: []\nidentifier_patterns: []\n")
        db = tmp_path / "results.db"
        result = _profile(CliRunner(), csv_dir, db, "--config", str(cfg))
        assert result.exit_code == 0, result.output
        store = DuckStore(db)
        try:
            assert store.fetch_issues("ing1", "raw", severities=("critical",)) == []
        finally:
            store.close()

    def test_invalid_config(self, tmp_path, csv_dir):
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("missingness_thresholds:\n  high: lots\n")
        result = _profile(CliRunner(), csv_dir, tmp_path / "results.db", "--config", str(cfg))
        assert result.exit_code == 2
        assert "Invalid profiling config" in result.output

    def test_requires_one_source(self, tmp_path):
        result = CliRunner().invoke(main, ["profile", "--db", str(tmp_path / "r.db"), "--ingest-id", "x"])
        assert result.exit_code == 2

    def test_empty_directory(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = _profile(CliRunner(), empty, tmp_path / "results.db")
        assert result.exit_code == 2
        assert "no tables supplied" in result.output

    def test_db_from_environment(self, tmp_path, csv_dir, monkeypatch):
        db = tmp_path / "env.db"
        monkeypatch.setenv("PULSE_DB_PATH", str(db))
        result = CliRunner().invoke(main, ["profile", "--csv-dir", str(csv_dir), "--ingest-id", "ing1"])
        assert result.exit_code == 0, result.output
        assert db.exists()


# ── review ───────────────────────────────────────────────────────────

class TestReviewCommand:
    def test_review(self, tmp_path, csv_dir):
        db = tmp_path / "results.db"
        runner = CliRunner()
        assert _profile(runner, csv_dir, db).exit_code == 0
        result = runner.invoke(main, ["review", "--db", str(db), "--ingest-id", "ing1"])
        assert result.exit_code == 0, result.output
        assert "Quality scores by table" in result.output
        assert "Detected sentinels" in result.output

    def test_unknown_ingest(self, tmp_path, csv_dir):
        db = tmp_path / "results.db"
        runner = CliRunner()
        assert _profile(runner, csv_dir, db).exit_code == 0
        result = runner.invoke(main, ["review", "--db", str(db), "--ingest-id", "nope"])
        assert result.exit_code == 1
        assert "No profiling results" in result.output
