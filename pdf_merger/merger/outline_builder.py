"""Position-driven bookmark nesting for merged documents.

Every input document contributes one bookmark. Its parent is chosen from the
document's 1-based position in the input list (its "layer") and the layer
assigned before it:

- layer 1 hangs under ``slots[0]`` and is stored in ``slots[1]``;
- a later layer that does not skip ahead of the last one hangs under
  ``slots[layer - 1]`` and replaces it;
- otherwise the bookmark hangs under ``slots[last - 1]`` and is stored in
  ``slots[last]``, or under the root when no layer was assigned yet.

``slots[0]`` holds the "Table of Contents" root. An empty slot used as a parent
produces a top-level bookmark.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from pdf_merger.model.bookmark import BLACK, Bookmark, BookmarkStyle
from pdf_merger.model.document_graph import DocumentGraph
from pdf_merger.model.objects import ObjectId
from pdf_merger.utils.logger import get_logger

LOGGER = get_logger(__name__)

TOC_TITLE = "Table of Contents"
PAGE_TITLE_TEMPLATE = "Page {number}"


@dataclass(frozen=True, slots=True)
class LayerTransition:
    """Outcome of placing one layer: where the new bookmark hangs and is stored."""

    parent: Optional[int]
    slot: int
    last_layer: int


@dataclass(frozen=True, slots=True)
class LayerState:
    """Most recent layer and the latest bookmark created at each depth."""

    last_layer: int
    layer_parent: Tuple[Optional[int], ...]

    @classmethod
    def initial(cls, root_id: int, document_count: int) -> "LayerState":
        slots: Tuple[Optional[int], ...] = (root_id,) + (None,) * document_count
        return cls(last_layer=0, layer_parent=slots)

    def transition(self, layer: int) -> LayerTransition:
        """Apply the nesting rule to ``layer`` without creating anything."""
        last = self.last_layer
        if layer == 1:
            return LayerTransition(parent=self.layer_parent[0], slot=1, last_layer=1)
        if layer > 1 and (layer <= last or layer - 1 == last):
            return LayerTransition(parent=self.layer_parent[layer - 1], slot=layer - 1, last_layer=layer)
        if last > 0:
            return LayerTransition(parent=self.layer_parent[last - 1], slot=last, last_layer=last)
        return LayerTransition(parent=self.layer_parent[0], slot=1, last_layer=1)

    def record(self, transition: LayerTransition, bookmark_id: int) -> "LayerState":
        """Return the state after storing ``bookmark_id`` in the transition's slot."""
        slots = list(self.layer_parent)
        slots[transition.slot] = bookmark_id
        return LayerState(last_layer=transition.last_layer, layer_parent=tuple(slots))


class OutlineBuilder:
    """Creates the bookmark forest of a merge, one document at a time."""

    def __init__(self, graph: DocumentGraph, document_count: int) -> None:
        self._graph = graph
        self.root_id = graph.add_bookmark(Bookmark(title=TOC_TITLE))
        self.state = LayerState.initial(self.root_id, document_count)
        self._page_number = 1

    def add_document(self, layer: int, target: Optional[ObjectId]) -> int:
        """Create the bookmark for the document at position ``layer``."""
        title = ""
        if target is not None:
            title = PAGE_TITLE_TEMPLATE.format(number=self._page_number)
            self._page_number += 1

        transition = self.state.transition(layer)
        bookmark = Bookmark(title=title, color=BLACK, style=BookmarkStyle.NONE, target=target)
        bookmark_id = self._graph.add_bookmark(bookmark, transition.parent)
        self.state = self.state.record(transition, bookmark_id)
        LOGGER.debug(
            "Document %d bookmarked as %r under %s (last layer %d)",
            layer,
            title,
            transition.parent,
            transition.last_layer,
        )
        return bookmark_id
