# Tests for the case registry
"""
Test registration, filtering and the pass/fail/skip outcomes of test cases.
"""

import pytest

from gputest import (
    WHOLE_SUBMAT,
    CaseRegistry,
    Depth,
    FeatureSet,
    MatType,
    UnsupportedFeatureError,
    ValueMismatchError,
    combine,
)


@pytest.fixture
def registry(catalog):
    catalog.load_all()
    return CaseRegistry(catalog)


class TestRegistration:
    """Tests for adding test bodies."""

    def test_plain_body(self, registry):
        calls = []

        @registry.register("Add", "Accuracy")
        def add_accuracy():
            calls.append(True)

        assert registry.ids() == ["Add.Accuracy"]
        assert registry.run("Add.Accuracy").passed
        assert calls == [True]

    def test_parameterized_body(self, registry):
        seen = []
        params = combine([MatType(Depth.U8, 1), MatType(Depth.F32, 3)], WHOLE_SUBMAT)

        @registry.register("Resize", "Accuracy", params)
        def resize_accuracy(param):
            seen.append(param)

        assert len(registry) == 4
        assert registry.ids() == [f"Resize.Accuracy/{i}" for i in range(4)]
        registry.run_all()
        assert seen == params

    def test_decorator_returns_body(self, registry):
        def body():
            pass

        assert registry.register("A", "B")(body) is body

    def test_display_name(self, registry):
        @registry.register("Resize", "Accuracy", combine([MatType(Depth.U8, 3)], WHOLE_SUBMAT))
        def resize_accuracy(param):
            pass

        assert registry.get("Resize.Accuracy/1").display_name == "Resize.Accuracy/1 (CV_8UC3, sub matrix)"
        assert registry.get("missing") is None

    def test_duplicate_id(self, registry):
        registry.add("A.B", lambda: None)
        with pytest.raises(ValueError, match="already registered"):
            registry.add("A.B", lambda: None)

    def test_glob_filter(self, registry):
        for test_id in ("Add.Accuracy", "Add.Roi", "Sub.Accuracy"):
            registry.add(test_id, lambda: None)
        assert registry.ids("Add.*") == ["Add.Accuracy", "Add.Roi"]
        assert registry.ids("*.Accuracy") == ["Add.Accuracy", "Sub.Accuracy"]
        assert "Sub.Accuracy" in registry
        assert "Sub.Roi" not in registry


class TestRun:
    """Tests for running a single test instance."""

    def test_assertion_fails_and_resets_device(self, registry, backend):
        def body():
            raise ValueMismatchError("values differ")

        registry.add("Case.Fail", body)
        result = registry.run("Case.Fail")
        assert result.status == "failed"
        assert not result.passed
        assert result.message == "values differ"
        assert isinstance(result.error, ValueMismatchError)
        assert backend.reset_count == 1

    def test_unsupported_feature_skips(self, registry, catalog, devices, backend):
        def body():
            catalog.require_feature(devices[1], FeatureSet.NATIVE_DOUBLE)

        registry.add("Case.Double", body)
        result = registry.run("Case.Double")
        assert result.status == "skipped"
        assert isinstance(result.error, UnsupportedFeatureError)
        assert backend.reset_count == 0

    def test_other_errors_propagate(self, registry, backend):
        def body():
            raise RuntimeError("kernel launch failed")

        registry.add("Case.Crash", body)
        with pytest.raises(RuntimeError, match="kernel launch failed"):
            registry.run("Case.Crash")
        assert backend.reset_count == 1

    def test_unknown_id(self, registry):
        with pytest.raises(KeyError):
            registry.run("Nope.Nope")

    def test_run_all_collects_results(self, registry):
        registry.add("A.Pass", lambda: None)

        def failing():
            assert 1 == 2

        registry.add("A.Fail", failing)
        results = registry.run_all("A.*")
        assert [(r.test_id, r.status) for r in results] == [("A.Pass", "passed"), ("A.Fail", "failed")]

    def test_without_catalog(self):
        registry = CaseRegistry()

        def failing():
            raise AssertionError("boom")

        registry.add("A.Fail", failing)
        assert registry.run("A.Fail").status == "failed"
