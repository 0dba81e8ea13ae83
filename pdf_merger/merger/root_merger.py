"""Fold the Catalog and Pages roots of every input into a single pair."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from pdf_merger.model.document_graph import DocumentGraph
from pdf_merger.model.objects import (
    Array,
    Dictionary,
    Name,
    ObjectId,
    ObjectKind,
    PdfObject,
    Reference,
    Stream,
    classify,
)
from pdf_merger.utils.errors import StructuralError
from pdf_merger.utils.logger import get_logger

LOGGER = get_logger(__name__)

PAGE_MODE = "UseOutlines"


@dataclass(slots=True)
class MergedRoots:
    """Identifiers of the canonical Catalog and Pages in the output graph."""

    catalog_id: ObjectId
    pages_id: ObjectId
    page_count: int


class RootMerger:
    """Classifies source objects and rebuilds one Catalog/Pages pair in ``output``."""

    def __init__(self, output: DocumentGraph) -> None:
        self._output = output
        self._catalog: Optional[Tuple[ObjectId, Dictionary]] = None
        self._pages: Optional[Tuple[ObjectId, Dictionary]] = None
        self.dropped_outlines = 0

    def merge(self, objects: Mapping[ObjectId, PdfObject], pages: Mapping[ObjectId, Dictionary]) -> MergedRoots:
        """Insert ``objects`` and ``pages`` into the output graph under one root."""
        for object_id in sorted(objects):
            self._absorb(object_id, objects[object_id])

        if self._pages is None:
            raise StructuralError("Pages root not found.")
        pages_id, pages_dict = self._pages

        for page_id, page in pages.items():
            page.set("Parent", Reference(pages_id))
            self._output.objects[page_id] = page

        if self._catalog is None:
            raise StructuralError("Catalog root not found.")
        catalog_id, catalog = self._catalog

        pages_dict.pop("Parent", None)
        pages_dict.set("Count", len(pages))
        pages_dict.set("Kids", Array(Reference(page_id) for page_id in pages))
        self._output.objects[pages_id] = pages_dict

        catalog.set("Pages", Reference(pages_id))
        catalog.set("PageMode", Name(PAGE_MODE))
        catalog.pop("Outlines", None)
        self._output.objects[catalog_id] = catalog

        if self.dropped_outlines:
            LOGGER.info("Dropped %d outline objects from the inputs", self.dropped_outlines)
        return MergedRoots(catalog_id=catalog_id, pages_id=pages_id, page_count=len(pages))

    def _absorb(self, object_id: ObjectId, value: PdfObject) -> None:
        kind = classify(value)
        if kind is ObjectKind.CATALOG:
            self._keep_catalog(object_id, value)
        elif kind is ObjectKind.PAGES:
            self._merge_pages(object_id, value)
        elif kind is ObjectKind.PAGE:
            pass
        elif kind is ObjectKind.OUTLINES or kind is ObjectKind.OUTLINE:
            self.dropped_outlines += 1
        elif kind is ObjectKind.OTHER:
            self._output.objects[object_id] = value
        else:  # pragma: no cover
            raise AssertionError(f"Unhandled object kind {kind}")

    def _keep_catalog(self, object_id: ObjectId, value: PdfObject) -> None:
        if self._catalog is not None:
            LOGGER.debug("Discarding additional Catalog %s", object_id)
            return
        if not isinstance(value, Dictionary):
            LOGGER.warning("Ignoring Catalog %s stored as a stream", object_id)
            return
        self._catalog = (object_id, Dictionary(value))

    def _merge_pages(self, object_id: ObjectId, value: PdfObject) -> None:
        dictionary = value.dictionary if isinstance(value, Stream) else value
        if self._pages is None:
            self._pages = (object_id, Dictionary(dictionary))
            return
        canonical_id, merged = self._pages
        for key, item in dictionary.items():
            merged.setdefault(key, item)
        LOGGER.debug("Folded Pages %s into %s", object_id, canonical_id)
