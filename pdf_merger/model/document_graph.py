"""Addressable PDF object graph with renumbering and page-tree traversal."""
from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from pdf_merger.model.bookmark import Bookmark, BookmarkForest
from pdf_merger.model.objects import (
    Dictionary,
    ObjectId,
    ObjectKind,
    PdfObject,
    Reference,
    classify,
    iter_references,
    rewrite_references,
)
from pdf_merger.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_VERSION = "1.7"


class DocumentGraph:
    """Objects keyed by identifier, a trailer, and the bookmark forest."""

    def __init__(
        self,
        objects: Optional[Dict[ObjectId, PdfObject]] = None,
        trailer: Optional[Dictionary] = None,
        version: str = DEFAULT_VERSION,
    ) -> None:
        self.objects: Dict[ObjectId, PdfObject] = dict(objects or {})
        self.trailer = trailer if trailer is not None else Dictionary()
        self.version = version
        self.max_id = max((number for number, _ in self.objects), default=0)
        self.bookmarks = BookmarkForest()

    # ------------------------------------------------------------------
    # Object access
    def get_object(self, object_id: ObjectId) -> PdfObject:
        try:
            return self.objects[object_id]
        except KeyError:
            raise KeyError(f"Object {object_id} not found") from None

    def get_object_mut(self, object_id: ObjectId) -> Dictionary:
        """Return the dictionary stored under ``object_id`` for in-place edits."""
        value = self.get_object(object_id)
        if not isinstance(value, Dictionary):
            raise TypeError(f"Object {object_id} is not a dictionary")
        return value

    def add_object(self, value: PdfObject) -> ObjectId:
        """Store ``value`` under the next free identifier and return it."""
        self.max_id += 1
        object_id = (self.max_id, 0)
        self.objects[object_id] = value
        return object_id

    def resolve(self, value: PdfObject) -> PdfObject:
        """Follow ``value`` if it is a reference; missing targets resolve to null."""
        if isinstance(value, Reference):
            return self.objects.get(value.object_id)
        return value

    def root_id(self) -> Optional[ObjectId]:
        root = self.trailer.get("Root")
        return root.object_id if isinstance(root, Reference) else None

    # ------------------------------------------------------------------
    # Page tree
    def get_pages(self) -> List[Tuple[int, ObjectId]]:
        """Return ``(page_number, page_id)`` pairs in page-tree order."""
        root_id = self.root_id()
        catalog = self.objects.get(root_id) if root_id else None
        if not isinstance(catalog, Dictionary):
            return []

        pages: List[ObjectId] = []
        visited: Set[ObjectId] = set()
        self._collect_pages(catalog.get("Pages"), pages, visited)
        return list(enumerate(pages, start=1))

    def _collect_pages(self, node_ref: PdfObject, pages: List[ObjectId], visited: Set[ObjectId]) -> None:
        if not isinstance(node_ref, Reference) or node_ref.object_id in visited:
            return
        visited.add(node_ref.object_id)
        node = self.objects.get(node_ref.object_id)
        if not isinstance(node, Dictionary):
            return
        kind = classify(node)
        if kind is ObjectKind.PAGES or (kind is not ObjectKind.PAGE and "Kids" in node):
            kids = self.resolve(node.get("Kids"))
            for kid in kids if isinstance(kids, list) else ():
                self._collect_pages(kid, pages, visited)
            return
        pages.append(node_ref.object_id)

    # ------------------------------------------------------------------
    # Renumbering
    def renumber_objects_with(self, starting_id: int) -> None:
        """Assign consecutive object numbers from ``starting_id`` in identifier order.

        Generations are kept. References to identifiers that are not part of
        the graph are left untouched.
        """
        replace: Dict[ObjectId, ObjectId] = {}
        new_number = starting_id
        for object_id in sorted(self.objects):
            if object_id[0] != new_number:
                replace[object_id] = (new_number, object_id[1])
            new_number += 1

        if replace:
            self._apply_renumbering(replace)
        self.max_id = new_number - 1

    def renumber_objects(self) -> None:
        self.renumber_objects_with(1)

    def _apply_renumbering(self, replace: Dict[ObjectId, ObjectId]) -> None:
        def _swap(reference: Reference) -> Reference:
            new_id = replace.get(reference.object_id)
            return reference if new_id is None else Reference(new_id)

        renumbered: Dict[ObjectId, PdfObject] = {}
        for object_id, value in self.objects.items():
            renumbered[replace.get(object_id, object_id)] = rewrite_references(value, _swap)
        self.objects = renumbered
        self.trailer = rewrite_references(self.trailer, _swap)
        self.bookmarks.remap_targets(replace)

    # ------------------------------------------------------------------
    # Graph repair
    def prune_unreachable(self) -> int:
        """Drop every object that cannot be reached from the trailer."""
        reachable: Set[ObjectId] = set()
        pending = [ref.object_id for ref in iter_references(self.trailer)]
        while pending:
            object_id = pending.pop()
            if object_id in reachable or object_id not in self.objects:
                continue
            reachable.add(object_id)
            pending.extend(ref.object_id for ref in iter_references(self.objects[object_id]))

        unreachable = [object_id for object_id in self.objects if object_id not in reachable]
        for object_id in unreachable:
            del self.objects[object_id]
        if unreachable:
            LOGGER.debug("Pruned %d unreachable objects", len(unreachable))
        return len(unreachable)

    def drop_dangling_references(self) -> int:
        """Remove references whose target is not part of the graph."""
        dropped = 0

        def _check(reference: Reference) -> Optional[Reference]:
            nonlocal dropped
            if reference.object_id in self.objects:
                return reference
            dropped += 1
            return None

        for object_id, value in self.objects.items():
            self.objects[object_id] = rewrite_references(value, _check)
        self.trailer = rewrite_references(self.trailer, _check)
        if dropped:
            LOGGER.warning("Dropped %d references to missing objects", dropped)
        return dropped

    # ------------------------------------------------------------------
    # Bookmarks
    def add_bookmark(self, bookmark: Bookmark, parent: Optional[int] = None) -> int:
        return self.bookmarks.add_bookmark(bookmark, parent)

    def adjust_zero_pages(self) -> None:
        self.bookmarks.adjust_zero_pages()

    def build_outline(self) -> Optional[ObjectId]:
        return self.bookmarks.materialize(self)
