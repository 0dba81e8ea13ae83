"""Identifier renumbering that keeps merged documents collision free."""
from __future__ import annotations

from pdf_merger.model.document_graph import DocumentGraph
from pdf_merger.utils.logger import get_logger

LOGGER = get_logger(__name__)


def renumber_document(graph: DocumentGraph, offset: int) -> int:
    """Shift every identifier of ``graph`` to start at ``offset``.

    References to objects missing from ``graph`` are dropped first, so they
    cannot land on another document's identifiers after the shift. Returns the
    first identifier the next document may use. An empty graph leaves
    ``offset`` unchanged.
    """
    graph.drop_dangling_references()
    graph.renumber_objects_with(offset)
    next_offset = graph.max_id + 1
    LOGGER.debug("Renumbered %d objects into [%d, %d)", len(graph.objects), offset, next_offset)
    return next_offset
