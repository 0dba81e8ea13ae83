"""Drive renumbering, page collection, root merging and outline building."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from pdf_merger.merger.outline_builder import OutlineBuilder
from pdf_merger.merger.page_collector import PageCollector
from pdf_merger.merger.renumbering import renumber_document
from pdf_merger.merger.root_merger import RootMerger
from pdf_merger.model.document_graph import DocumentGraph
from pdf_merger.model.objects import ObjectId, PdfObject, Reference
from pdf_merger.parser.pdf_loader import load_document
from pdf_merger.renderer.pdf_writer import PdfFileWriter
from pdf_merger.utils.config import MIN_INPUT_FILES
from pdf_merger.utils.errors import ConfigurationError
from pdf_merger.utils.logger import get_logger

LOGGER = get_logger(__name__)

Loader = Callable[[Path], DocumentGraph]


@dataclass(slots=True)
class MergeResult:
    """Merged graph plus the identifiers callers usually need."""

    graph: DocumentGraph
    catalog_id: ObjectId
    pages_id: ObjectId
    page_count: int
    outlines_id: Optional[ObjectId] = None
    sources: List[str] = field(default_factory=list)


class Assembler:
    """Merge documents in input order into one graph with a bookmark outline."""

    def __init__(self, loader: Loader = load_document) -> None:
        self._loader = loader

    def merge_files(self, paths: Sequence[Union[str, Path]], output_path: Path) -> MergeResult:
        """Load ``paths``, merge them and write the result to ``output_path``."""
        _require_inputs(len(paths))
        documents = []
        for path in paths:
            LOGGER.info("Loading %s", path)
            documents.append(self._loader(Path(path)))

        result = self.merge(documents)
        result.sources = [str(path) for path in paths]
        PdfFileWriter(output_path).render(result.graph)
        return result

    def merge(self, documents: Sequence[DocumentGraph]) -> MergeResult:
        """Merge already loaded ``documents`` without touching the filesystem."""
        _require_inputs(len(documents))

        output = DocumentGraph(version=max(doc.version for doc in documents))
        outline = OutlineBuilder(output, len(documents))
        collector = PageCollector()
        objects: Dict[ObjectId, PdfObject] = {}

        offset = 1
        for layer, document in enumerate(documents, start=1):
            offset = renumber_document(document, offset)
            first_page = collector.collect(document)
            outline.add_document(layer, first_page)
            objects.update(document.objects)
            LOGGER.debug("Document %d contributed first page %s", layer, first_page)

        roots = RootMerger(output).merge(objects, collector.pages)

        output.trailer.set("Root", Reference(roots.catalog_id))
        info = documents[0].trailer.get("Info")
        if isinstance(info, Reference) and info.object_id in output.objects:
            output.trailer.set("Info", info)

        output.prune_unreachable()
        output.drop_dangling_references()

        output.max_id = len(output.objects)
        output.renumber_objects()
        catalog_id = output.root_id()
        pages_id = output.get_object_mut(catalog_id)["Pages"].object_id

        output.adjust_zero_pages()
        outlines_id = output.build_outline()
        if outlines_id is not None:
            output.get_object_mut(catalog_id).set("Outlines", Reference(outlines_id))

        LOGGER.info("Merged %d documents into %d pages", len(documents), roots.page_count)
        return MergeResult(
            graph=output,
            catalog_id=catalog_id,
            pages_id=pages_id,
            page_count=roots.page_count,
            outlines_id=outlines_id,
        )


def _require_inputs(count: int) -> None:
    if count < MIN_INPUT_FILES:
        raise ConfigurationError(f"At least {MIN_INPUT_FILES} input files are required, got {count}")
