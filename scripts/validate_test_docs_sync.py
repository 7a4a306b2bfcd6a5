#!/usr/bin/env python3
"""
Check that docs/test_scenarios_business_summary.md covers tests/test_integration_scenarios.py.

Every scenario class and test method must be listed in the summary, and the
summary must not list scenarios that were removed.

Run: python scripts/validate_test_docs_sync.py
"""

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
TEST_FILE = PROJECT_ROOT / 'tests' / 'test_integration_scenarios.py'
DOC_FILE = PROJECT_ROOT / 'docs' / 'test_scenarios_business_summary.md'

CLASS_DEF = re.compile(r'^class (Test\w+)')
METHOD_DEF = re.compile(r'^\s+def (test_\w+)')
DOC_CLASS = re.compile(r'\*\*Test Class\*\*:\s*`(Test\w+)`')
DOC_METHOD = re.compile(r'\*\*Test Method\*\*:\s*`(test_\w+)`')


@dataclass
class SyncReport:
    undocumented_classes: set[str] = field(default_factory=set)
    undocumented_methods: set[str] = field(default_factory=set)
    stale_classes: set[str] = field(default_factory=set)
    stale_methods: set[str] = field(default_factory=set)

    @property
    def in_sync(self) -> bool:
        return not (
            self.undocumented_classes or self.undocumented_methods
            or self.stale_classes or self.stale_methods
        )


def collect_scenarios(test_file: Path) -> dict[str, list[str]]:
    """Map each scenario class to its test methods, in file order."""
    scenarios: dict[str, list[str]] = {}
    owner = None
    for line in test_file.read_text().splitlines():
        if match := CLASS_DEF.match(line):
            owner = match.group(1)
            scenarios[owner] = []
        elif owner and (match := METHOD_DEF.match(line)):
            scenarios[owner].append(match.group(1))
    return scenarios


def collect_documented(doc_file: Path) -> tuple[set[str], set[str]]:
    text = doc_file.read_text()
    return set(DOC_CLASS.findall(text)), set(DOC_METHOD.findall(text))


def compare(test_file: Path = TEST_FILE, doc_file: Path = DOC_FILE) -> SyncReport:
    scenarios = collect_scenarios(test_file)
    doc_classes, doc_methods = collect_documented(doc_file)
    classes = set(scenarios)
    methods = {name for names in scenarios.values() for name in names}
    return SyncReport(
        undocumented_classes=classes - doc_classes,
        undocumented_methods=methods - doc_methods,
        stale_classes=doc_classes - classes,
        stale_methods=doc_methods - methods,
    )


def main() -> int:
    for path in (TEST_FILE, DOC_FILE):
        if not path.exists():
            print(f"Missing file: {path}")
            return 1

    report = compare()
    scenarios = collect_scenarios(TEST_FILE)
    doc_classes, doc_methods = collect_documented(DOC_FILE)

    print(f"{TEST_FILE.name} vs {DOC_FILE.name}")
    for cls, methods in scenarios.items():
        print(f"  [{'ok' if cls in doc_classes else 'MISSING'}] {cls}")
        for method in methods:
            print(f"      [{'ok' if method in doc_methods else 'MISSING'}] {method}")

    for label, names in (
        ("Documented class no longer exists", report.stale_classes),
        ("Documented method no longer exists", report.stale_methods),
    ):
        for name in sorted(names):
            print(f"  {label}: {name}")

    if report.in_sync:
        print("All scenarios are documented.")
        return 0
    return 1


if __name__ == '__main__':
    sys.exit(main())
