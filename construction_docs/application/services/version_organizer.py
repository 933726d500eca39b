"""Version organizer: group one construction's documents into version folders.

Pure functions over an already-fetched list. Output is recomputed on every
call and never cached; ordering is a display contract (newest version first).
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from construction_docs.application.dtos.document import DocumentResult
from construction_docs.domain.enums import DocumentCategory


@dataclass(frozen=True)
class VersionGroup:
    """All documents sharing a version number, subdivided by category.

    documents_by_category always holds every known construction category
    (possibly as an empty list) in DocumentCategory declaration order.
    """

    version_number: int
    documents_by_category: dict[str, list[DocumentResult]] = field(default_factory=dict)

    def documents(self, category: DocumentCategory | str) -> list[DocumentResult]:
        key = category.value if isinstance(category, DocumentCategory) else category
        return self.documents_by_category.get(key, [])


def effective_version(document: DocumentResult) -> int:
    """Return the document's version, or 1 for legacy records without one."""
    return 1 if document.version is None else document.version


def _display_order(document: DocumentResult) -> tuple:
    return (document.uploaded_at, document.id)


def organize_by_version(
    documents: Iterable[DocumentResult],
    categories: Sequence[str] | None = None,
) -> list[VersionGroup]:
    """Bucket documents by effective version and category, newest version first.

    Args:
        documents: Documents of one construction, in any order.
        categories: Category keys every group must carry; defaults to the
            construction categories. Categories found on documents but not
            listed here are appended after them, sorted, so nothing is dropped.

    Returns:
        One VersionGroup per distinct effective version, sorted descending.
        Empty input returns an empty list.
    """
    known = list(categories) if categories is not None else DocumentCategory.values()
    buckets: dict[int, dict[str, list[DocumentResult]]] = defaultdict(
        lambda: defaultdict(list)
    )
    for doc in documents:
        buckets[effective_version(doc)][doc.category].append(doc)

    groups: list[VersionGroup] = []
    for version in sorted(buckets, reverse=True):
        by_category = buckets[version]
        extra = sorted(c for c in by_category if c not in known)
        groups.append(
            VersionGroup(
                version_number=version,
                documents_by_category={
                    c: sorted(by_category.get(c, []), key=_display_order)
                    for c in [*known, *extra]
                },
            )
        )
    return groups


def current_latest_version(documents: Iterable[DocumentResult]) -> int:
    """Return the highest effective version across all categories, or 1 if empty."""
    return max((effective_version(d) for d in documents), default=1)


def next_version(documents: Iterable[DocumentResult]) -> int:
    """Return the version a default upload starts: latest + 1, or 1 for no documents."""
    docs = list(documents)
    if not docs:
        return 1
    return current_latest_version(docs) + 1
