"""Tests for pulse.profiler.issues."""

from pulse.config import ProfilingConfig
from pulse.models.enums import InferredType, Severity
from pulse.profiler.issues import generate_issues
from pulse.profiler.missingness import profile_missingness


def _column(n_missing, n_total=20, distinct=True):
    valid = [f"v{i}" if distinct else "v" for i in range(n_total - n_missing)]
    return valid + [None] * n_missing


def _issues(values, column_type, config, name="col"):
    m = profile_missingness(values)
    return generate_issues(name, "t", m, column_type, m.unique_count, m.total_count, config)


# ── missingness rules ────────────────────────────────────────────────

class TestMissingnessRules:
    def test_identifier_missing_is_critical(self, config):
        values = [str(i) for i in range(9)] + [None]
        issues = _issues(values, InferredType.IDENTIFIER, config, name="mrn")
        assert len(issues) == 1
        issue = issues[0]
        assert issue.issue_type == "identifier_missing"
        assert issue.severity is Severity.CRITICAL
        assert issue.value == 10.0
        assert issue.description == "Identifier column mrn has 10% missing values"
        assert issue.table_name == "t"

    def test_description_follows_decimal_places(self):
        config = ProfilingConfig.from_mapping({"display": {"decimal_places": 6}})
        m = profile_missingness(["1", "2", None], decimal_places=6)
        (issue,) = generate_issues("mrn", "t", m, InferredType.IDENTIFIER, m.unique_count, m.total_count, config)
        assert issue.value == 33.333333
        assert issue.description == "Identifier column mrn has 33.333333% missing values"

    def test_zero_decimal_places_keeps_integer_zeros(self):
        config = ProfilingConfig.from_mapping({"display": {"decimal_places": 0}})
        values = [str(i) for i in range(7)] + [None] * 3
        m = profile_missingness(values, decimal_places=0)
        (issue,) = generate_issues("mrn", "t", m, InferredType.IDENTIFIER, m.unique_count, m.total_count, config)
        assert issue.description == "Identifier column mrn has 30% missing values"

    def test_complete_identifier_has_no_issue(self, config):
        values = [str(i) for i in range(20)]
        assert _issues(values, InferredType.IDENTIFIER, config) == []

    def test_high_missingness_is_warning(self, config):
        issues = _issues(_column(5, distinct=False), InferredType.CATEGORICAL, config, name="race")
        types = [i.issue_type for i in issues]
        assert "high_missingness" in types
        high = issues[types.index("high_missingness")]
        assert high.severity is Severity.WARNING
        assert high.value == 25.0
        assert high.description == "race has 25% missing values (threshold: 20%)"

    def test_moderate_missingness_is_info(self, config):
        issues = _issues(_column(3, distinct=False), InferredType.NUMERIC, config)
        moderate = [i for i in issues if i.issue_type == "moderate_missingness"]
        assert len(moderate) == 1
        assert moderate[0].severity is Severity.INFO
        assert moderate[0].value == 15.0

    def test_boundaries(self, config):
        # exactly at high: moderate, exactly at moderate: nothing
        at_high = _issues(_column(4, distinct=False), InferredType.CATEGORICAL, config)
        assert [i.issue_type for i in at_high if "missingness" in i.issue_type] == ["moderate_missingness"]
        at_moderate = _issues(_column(2, distinct=False), InferredType.CATEGORICAL, config)
        assert [i.issue_type for i in at_moderate if "missingness" in i.issue_type] == []

    def test_identifier_never_gets_high_missingness(self, config):
        issues = _issues(_column(10), InferredType.IDENTIFIER, config)
        assert [i.issue_type for i in issues] == ["identifier_missing"]


# ── value rules ──────────────────────────────────────────────────────

class TestValueRules:
    def test_constant_value(self, config):
        issues = _issues(["A"] * 5, InferredType.CATEGORICAL, config, name="site")
        assert [i.issue_type for i in issues] == ["constant_value"]
        assert issues[0].description == "site has only one unique value across 5 rows"
        assert issues[0].value == 1.0

    def test_high_cardinality(self, config):
        values = [f"note {i}" for i in range(11)]
        issues = _issues(values, InferredType.CATEGORICAL, config, name="notes")
        assert [i.issue_type for i in issues] == ["high_cardinality"]
        assert issues[0].value == 100.0
        assert issues[0].description == "notes has 100% unique values (11 of 11)"

    def test_high_cardinality_needs_more_than_ten_rows(self, config):
        values = [f"note {i}" for i in range(10)]
        assert _issues(values, InferredType.CATEGORICAL, config) == []

    def test_high_cardinality_skips_identifiers(self, config):
        values = [str(i) for i in range(50)]
        assert _issues(values, InferredType.IDENTIFIER, config) == []

    def test_several_rules_fire(self, config):
        values = ["A"] * 3 + [None] * 2
        types = {i.issue_type for i in _issues(values, InferredType.CATEGORICAL, config)}
        assert types == {"high_missingness", "constant_value"}
