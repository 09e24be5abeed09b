"""Tests for pulse.pipeline."""

import pytest

from pulse.models.enums import QualityScore
from pulse.models.table import TableSnapshot
from pulse.pipeline import profile_data
from pulse.store.duck_store import PROFILING_TABLES, DuckStore


@pytest.fixture
def store():
    s = DuckStore(":memory:")
    s.init_tables()
    yield s
    s.close()


def _counts(store, ingest_id="ing1", schema="raw"):
    return {t: store.count_rows(t, ingest_id, schema) for t in PROFILING_TABLES}


class TestProfileData:
    def test_run_summary(self, store, config, clinic_table):
        complete = TableSnapshot("labs", {"code": ["A", "B", "C", "D"]})
        run = profile_data([clinic_table, complete], store, "ing1", config)
        assert run.tables_profiled == 2
        assert run.variables_profiled == 5
        assert run.sentinels_detected == 1
        assert run.critical_issues == 1
        assert run.table_scores == {"visits": QualityScore.GOOD, "labs": QualityScore.EXCELLENT}
        assert run.overall_score is QualityScore.GOOD

    def test_rerun_is_idempotent(self, store, config, clinic_table):
        profile_data([clinic_table], store, "ing1", config)
        first = _counts(store)
        profile_data([clinic_table], store, "ing1", config)
        assert _counts(store) == first
        assert first["data_profile"] == 4

    def test_schemas_are_independent(self, store, config, clinic_table):
        profile_data([clinic_table], store, "ing1", config, schema_name="raw")
        profile_data([clinic_table], store, "ing1", config, schema_name="staging")
        assert _counts(store, schema="raw") == _counts(store, schema="staging")

    def test_lazy_iterable(self, store, config, clinic_table):
        run = profile_data(iter([clinic_table]), store, "ing1", config)
        assert run.tables_profiled == 1

    @pytest.mark.parametrize("ingest_id", ["", "   "])
    def test_empty_ingest_id(self, store, config, clinic_table, ingest_id):
        with pytest.raises(ValueError):
            profile_data([clinic_table], store, ingest_id, config)

    def test_no_tables(self, store, config, clinic_table):
        profile_data([clinic_table], store, "ing1", config)
        with pytest.raises(ValueError):
            profile_data([], store, "ing1", config)
        # earlier results are left untouched
        assert _counts(store)["data_profile_summary"] == 1

    def test_failed_write_keeps_previous_run(self, store, config, clinic_table, monkeypatch):
        complete = TableSnapshot("labs", {"code": ["A", "B", "C", "D"]})
        profile_data([clinic_table, complete], store, "ing1", config)
        before = _counts(store)
        original = store._insert_result

        def fail_on_labs(ingest_id, schema_name, result):
            if result.table_name == "labs":
                raise RuntimeError("write failed")
            return original(ingest_id, schema_name, result)

        monkeypatch.setattr(store, "_insert_result", fail_on_labs)
        with pytest.raises(RuntimeError):
            profile_data([clinic_table, complete], store, "ing1", config)
        assert _counts(store) == before
        assert before["data_profile_summary"] == 2
