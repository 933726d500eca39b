"""Unit tests for grouping documents into version folders."""

import random

from construction_docs.application.services.version_organizer import (
    current_latest_version,
    effective_version,
    next_version,
    organize_by_version,
)
from tests.fakes import make_document

WORKING = "working_documentation"
PROJECT = "project_documentation"


def test_two_versions_grouped_newest_first() -> None:
    """v2 has one document per category; v1 only a working document."""
    docs = [
        make_document("w2", category=WORKING, version=2, minutes=10),
        make_document("p2", category=PROJECT, version=2, minutes=11),
        make_document("w1", category=WORKING, version=1, minutes=0),
    ]
    groups = organize_by_version(docs)

    assert [g.version_number for g in groups] == [2, 1]
    assert [d.id for d in groups[0].documents(WORKING)] == ["w2"]
    assert [d.id for d in groups[0].documents(PROJECT)] == ["p2"]
    assert [d.id for d in groups[1].documents(WORKING)] == ["w1"]
    assert groups[1].documents(PROJECT) == []


def test_every_group_carries_both_categories_in_order() -> None:
    groups = organize_by_version([make_document("a", category=PROJECT, version=3)])
    assert list(groups[0].documents_by_category) == [WORKING, PROJECT]
    assert groups[0].documents_by_category[WORKING] == []


def test_empty_input_returns_no_groups() -> None:
    assert organize_by_version([]) == []


def test_missing_version_counts_as_one() -> None:
    legacy = make_document("old", version=None)
    groups = organize_by_version([legacy, make_document("new", version=2, minutes=5)])
    assert [g.version_number for g in groups] == [2, 1]
    assert groups[1].documents(WORKING) == [legacy]
    assert effective_version(legacy) == 1


def test_gaps_are_not_filled() -> None:
    docs = [make_document("a", version=1), make_document("b", version=3, minutes=1)]
    assert [g.version_number for g in organize_by_version(docs)] == [3, 1]


def test_documents_within_category_ordered_by_upload_time() -> None:
    docs = [
        make_document("late", version=1, minutes=30),
        make_document("early", version=1, minutes=1),
        make_document("mid", version=1, minutes=15),
    ]
    group = organize_by_version(docs)[0]
    assert [d.id for d in group.documents(WORKING)] == ["early", "mid", "late"]


def test_result_independent_of_input_order() -> None:
    docs = [
        make_document(f"d{i}", category=WORKING if i % 2 else PROJECT, version=i % 4 + 1, minutes=i)
        for i in range(20)
    ]
    expected = organize_by_version(docs)
    shuffled = docs[:]
    for seed in range(5):
        random.Random(seed).shuffle(shuffled)
        assert organize_by_version(shuffled) == expected


def test_every_document_appears_exactly_once() -> None:
    docs = [make_document(f"d{i}", version=i % 3 + 1, minutes=i) for i in range(9)]
    groups = organize_by_version(docs)
    seen = [d.id for g in groups for docs_ in g.documents_by_category.values() for d in docs_]
    assert sorted(seen) == sorted(d.id for d in docs)


def test_unknown_category_kept_after_known_ones() -> None:
    docs = [make_document("x", category="as_built", version=1)]
    group = organize_by_version(docs)[0]
    assert list(group.documents_by_category) == [WORKING, PROJECT, "as_built"]
    assert [d.id for d in group.documents("as_built")] == ["x"]


class TestVersionNumbers:
    def test_latest_is_max_across_categories(self) -> None:
        docs = [
            make_document("a", category=WORKING, version=2),
            make_document("b", category=PROJECT, version=5),
        ]
        assert current_latest_version(docs) == 5

    def test_latest_of_empty_is_one(self) -> None:
        assert current_latest_version([]) == 1

    def test_next_after_three_is_four(self) -> None:
        docs = [make_document(f"d{v}", version=v) for v in (1, 2, 3)]
        assert next_version(docs) == 4

    def test_next_for_empty_construction_is_one(self) -> None:
        assert next_version([]) == 1

    def test_next_with_only_legacy_documents_is_two(self) -> None:
        assert next_version([make_document("old", version=None)]) == 2
