"""
Keeps the business summary in step with the integration scenarios.

Fails when a scenario is added without a summary entry, or when the summary
still describes a scenario that was removed.
"""

import importlib.util
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parent.parent / 'scripts' / 'validate_test_docs_sync.py'


@pytest.fixture(scope='module')
def docs_sync():
    module_spec = importlib.util.spec_from_file_location('validate_test_docs_sync', SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture(scope='module')
def report(docs_sync):
    return docs_sync.compare()


class TestDocumentationSync:

    def test_files_exist(self, docs_sync):
        assert docs_sync.TEST_FILE.exists()
        assert docs_sync.DOC_FILE.exists()

    def test_scenarios_found(self, docs_sync):
        scenarios = docs_sync.collect_scenarios(docs_sync.TEST_FILE)
        assert scenarios
        assert all(methods for methods in scenarios.values())

    def test_every_class_documented(self, report):
        assert not report.undocumented_classes, (
            f"Add to docs/test_scenarios_business_summary.md: {sorted(report.undocumented_classes)}"
        )

    def test_every_method_documented(self, report):
        assert not report.undocumented_methods, (
            f"Add to docs/test_scenarios_business_summary.md: {sorted(report.undocumented_methods)}"
        )

    def test_no_stale_entries(self, report):
        stale = report.stale_classes | report.stale_methods
        assert not stale, f"Remove from docs/test_scenarios_business_summary.md: {sorted(stale)}"
