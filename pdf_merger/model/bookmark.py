"""Bookmark entities and the forest they form before becoming an outline."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Tuple

from pdf_merger.model.objects import Array, Dictionary, Name, ObjectId, Reference
from pdf_merger.utils.logger import get_logger

if TYPE_CHECKING:
    from pdf_merger.model.document_graph import DocumentGraph

LOGGER = get_logger(__name__)

Color = Tuple[float, float, float]
BLACK: Color = (0.0, 0.0, 0.0)


class BookmarkStyle(IntFlag):
    """Outline item text style, stored in the item's ``F`` entry."""

    NONE = 0
    ITALIC = 1
    BOLD = 2


@dataclass(slots=True)
class Bookmark:
    """Navigable outline entry pointing at a page object."""

    title: str
    color: Color = BLACK
    style: BookmarkStyle = BookmarkStyle.NONE
    target: Optional[ObjectId] = None
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)


class BookmarkForest:
    """Bookmarks keyed by id, grouped into top-level roots and child lists."""

    def __init__(self) -> None:
        self._bookmarks: Dict[int, Bookmark] = {}
        self._roots: List[int] = []
        self._next_id = 1

    @property
    def roots(self) -> List[int]:
        return list(self._roots)

    def get(self, bookmark_id: int) -> Bookmark:
        return self._bookmarks[bookmark_id]

    def add_bookmark(self, bookmark: Bookmark, parent: Optional[int] = None) -> int:
        """Register ``bookmark`` under ``parent`` (or as a root) and return its id."""
        bookmark_id = self._next_id
        self._next_id += 1
        if parent is not None and parent not in self._bookmarks:
            raise KeyError(f"Unknown parent bookmark {parent}")
        bookmark.parent = parent
        self._bookmarks[bookmark_id] = bookmark
        if parent is None:
            self._roots.append(bookmark_id)
        else:
            self._bookmarks[parent].children.append(bookmark_id)
        return bookmark_id

    def iter_preorder(self) -> Iterator[int]:
        """Yield bookmark ids in document order (parents before children)."""
        stack = list(reversed(self._roots))
        while stack:
            bookmark_id = stack.pop()
            yield bookmark_id
            stack.extend(reversed(self._bookmarks[bookmark_id].children))

    def remap_targets(self, replace: Mapping[ObjectId, ObjectId]) -> None:
        """Follow an identifier renumbering for every concrete target."""
        for bookmark in self._bookmarks.values():
            if bookmark.target is not None and bookmark.target in replace:
                bookmark.target = replace[bookmark.target]

    def adjust_zero_pages(self) -> None:
        """Give every target-less bookmark the next concrete target in document order.

        The nearest descendant wins because descendants follow their parent in
        pre-order; otherwise the next bookmark after the subtree is used.
        """
        pending: List[Bookmark] = []
        for bookmark_id in self.iter_preorder():
            bookmark = self._bookmarks[bookmark_id]
            if bookmark.target is None:
                pending.append(bookmark)
                continue
            for waiting in pending:
                waiting.target = bookmark.target
            pending.clear()
        for waiting in pending:
            LOGGER.warning("Bookmark %r has no page to point at", waiting.title)

    def materialize(self, graph: "DocumentGraph") -> Optional[ObjectId]:
        """Write the forest into ``graph`` as an Outlines dictionary chain."""
        if not self._bookmarks:
            return None

        outlines_id = graph.add_object(Dictionary(Type=Name("Outlines")))
        item_ids = {bookmark_id: graph.add_object(Dictionary()) for bookmark_id in self.iter_preorder()}

        for bookmark_id in self.iter_preorder():
            bookmark = self._bookmarks[bookmark_id]
            item = graph.get_object_mut(item_ids[bookmark_id])
            parent_id = outlines_id if bookmark.parent is None else item_ids[bookmark.parent]
            item.set("Title", bookmark.title)
            item.set("Parent", Reference(parent_id))
            self._link_siblings(item, bookmark_id, item_ids)
            self._link_children(item, bookmark.children, item_ids)
            if bookmark.target is not None:
                item.set("Dest", Array([Reference(bookmark.target), Name("Fit")]))
            item.set("C", Array(float(channel) for channel in bookmark.color))
            if bookmark.style:
                item.set("F", int(bookmark.style))

        outlines = graph.get_object_mut(outlines_id)
        self._link_children(outlines, self._roots, item_ids)
        LOGGER.debug("Materialized %d outline items under %s", len(item_ids), outlines_id)
        return outlines_id

    # ------------------------------------------------------------------
    def _siblings(self, bookmark_id: int) -> List[int]:
        parent = self._bookmarks[bookmark_id].parent
        return self._roots if parent is None else self._bookmarks[parent].children

    def _link_siblings(self, item: Dictionary, bookmark_id: int, item_ids: Mapping[int, ObjectId]) -> None:
        siblings = self._siblings(bookmark_id)
        position = siblings.index(bookmark_id)
        if position > 0:
            item.set("Prev", Reference(item_ids[siblings[position - 1]]))
        if position + 1 < len(siblings):
            item.set("Next", Reference(item_ids[siblings[position + 1]]))

    def _link_children(self, item: Dictionary, children: List[int], item_ids: Mapping[int, ObjectId]) -> None:
        if not children:
            return
        item.set("First", Reference(item_ids[children[0]]))
        item.set("Last", Reference(item_ids[children[-1]]))
        item.set("Count", self._descendant_count(children))

    def _descendant_count(self, children: List[int]) -> int:
        return sum(1 + self._descendant_count(self._bookmarks[child].children) for child in children)
