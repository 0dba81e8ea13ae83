"""Collect the pages of every input document in final page order."""
from __future__ import annotations

from copy import deepcopy
from typing import Dict, Optional, Set

from pdf_merger.model.document_graph import DocumentGraph
from pdf_merger.model.objects import Dictionary, ObjectId, Reference
from pdf_merger.utils.logger import get_logger

LOGGER = get_logger(__name__)

# Attributes a page may receive from an ancestor Pages node.
INHERITABLE_ATTRIBUTES = ("Resources", "MediaBox", "CropBox", "Rotate")


class PageCollector:
    """Accumulates page dictionaries across documents, keyed by identifier."""

    def __init__(self) -> None:
        self.pages: Dict[ObjectId, Dictionary] = {}

    def collect(self, graph: DocumentGraph) -> Optional[ObjectId]:
        """Record the pages of ``graph`` and return the first page's identifier."""
        first_page: Optional[ObjectId] = None
        for _, page_id in graph.get_pages():
            page = graph.objects.get(page_id)
            if not isinstance(page, Dictionary):
                LOGGER.warning("Skipping page %s: not a dictionary", page_id)
                continue
            if first_page is None:
                first_page = page_id
            self._materialize_inherited(graph, page)
            self.pages[page_id] = page
        return first_page

    def _materialize_inherited(self, graph: DocumentGraph, page: Dictionary) -> None:
        missing = [name for name in INHERITABLE_ATTRIBUTES if name not in page]
        parent = page.get("Parent")
        visited: Set[ObjectId] = set()
        while missing and isinstance(parent, Reference) and parent.object_id not in visited:
            visited.add(parent.object_id)
            node = graph.objects.get(parent.object_id)
            if not isinstance(node, Dictionary):
                break
            for name in list(missing):
                if name in node:
                    page[name] = deepcopy(node[name])
                    missing.remove(name)
            parent = node.get("Parent")
