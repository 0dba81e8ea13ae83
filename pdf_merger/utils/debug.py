"""Helpers to persist a summary of a merge for debugging."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, is_dataclass
from pathlib import Path
from typing import Any, List, Optional

from pdf_merger.model.document_graph import DocumentGraph

REPORT_NAME = "merge_report.json"


@dataclass(slots=True)
class BookmarkEntry:
    """Flattened outline item for the report."""

    title: str
    target: Optional[List[int]]
    children: List["BookmarkEntry"] = field(default_factory=list)


@dataclass(slots=True)
class MergeReport:
    """What a merge produced: sources, page order, and the bookmark tree."""

    sources: List[str]
    page_count: int
    kids: List[List[int]]
    bookmarks: List[BookmarkEntry]

    @classmethod
    def from_graph(cls, graph: DocumentGraph, sources: List[str]) -> "MergeReport":
        catalog = graph.get_object_mut(graph.root_id())
        pages = graph.get_object_mut(catalog["Pages"].object_id)
        kids = [list(kid.object_id) for kid in pages.get("Kids", [])]
        return cls(
            sources=list(sources),
            page_count=pages.get("Count", 0),
            kids=kids,
            bookmarks=[_entry(graph, root) for root in graph.bookmarks.roots],
        )


def _entry(graph: DocumentGraph, bookmark_id: int) -> BookmarkEntry:
    bookmark = graph.bookmarks.get(bookmark_id)
    target = list(bookmark.target) if bookmark.target is not None else None
    return BookmarkEntry(
        title=bookmark.title,
        target=target,
        children=[_entry(graph, child) for child in bookmark.children],
    )


class DebugDumper:
    """Writes intermediate artifacts onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, report: MergeReport) -> Path:
        """Persist the merge report as JSON for offline analysis."""
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = self._serialize(report)
        path = self.directory / REPORT_NAME
        path.write_text(json.dumps(payload, indent=2))
        return path

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value):
            return {k: self._serialize(v) for k, v in asdict(value).items()}
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
