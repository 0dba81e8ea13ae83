"""Load PDF files into a :class:`DocumentGraph` using pypdf."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

from pypdf import PdfReader
from pypdf.errors import PdfReadError
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    ByteStringObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    PdfObject as PypdfObject,
    StreamObject,
    TextStringObject,
)

from pdf_merger.model.document_graph import DEFAULT_VERSION, DocumentGraph
from pdf_merger.model.objects import (
    Array,
    Dictionary,
    Name,
    ObjectId,
    PdfObject,
    Reference,
    Stream,
)
from pdf_merger.utils.errors import DocumentLoadError
from pdf_merger.utils.logger import get_logger

LOGGER = get_logger(__name__)

# Trailer entries that describe the file rather than the document.
_FILE_STRUCTURE_KEYS = {"Size", "Prev", "XRefStm", "Encrypt", "Type", "W", "Index", "Filter", "DecodeParms", "Length"}


def load_document(path: Union[str, Path]) -> DocumentGraph:
    """Read ``path`` and return its object graph."""
    pdf_path = Path(path)
    try:
        reader = PdfReader(pdf_path)
        encrypted = reader.is_encrypted
        graph = None if encrypted else PdfGraphBuilder(reader).build()
    except (OSError, PdfReadError, ValueError) as exc:
        raise DocumentLoadError(pdf_path, str(exc)) from exc
    if graph is None:
        raise DocumentLoadError(pdf_path, "encrypted documents are not supported")

    LOGGER.debug("Loaded %d objects from %s", len(graph.objects), pdf_path.name)
    return graph


class PdfGraphBuilder:
    """Walk every indirect object reachable from the trailer of a pypdf reader."""

    def __init__(self, reader: PdfReader) -> None:
        self._reader = reader
        self._objects: Dict[ObjectId, PdfObject] = {}
        self._pending: List[IndirectObject] = []

    def build(self) -> DocumentGraph:
        trailer = Dictionary()
        for key, value in self._reader.trailer.items():
            name = self._name(key)
            if name in _FILE_STRUCTURE_KEYS:
                continue
            trailer[name] = self._convert(value)

        while self._pending:
            indirect = self._pending.pop()
            object_id = (indirect.idnum, indirect.generation)
            if object_id in self._objects:
                continue
            resolved = indirect.get_object()
            if resolved is None or isinstance(resolved, NullObject):
                LOGGER.debug("Reference %s points at a missing object", object_id)
                continue
            self._objects[object_id] = self._convert(resolved)

        return DocumentGraph(self._objects, trailer, version=self._version())

    def _version(self) -> str:
        header = self._reader.pdf_header or ""
        if header.startswith("%PDF-"):
            return header[len("%PDF-") :].strip()
        return DEFAULT_VERSION

    def _convert(self, value: Optional[PypdfObject]) -> PdfObject:
        if value is None or isinstance(value, NullObject):
            return None
        if isinstance(value, IndirectObject):
            self._pending.append(value)
            return Reference((value.idnum, value.generation))
        if isinstance(value, BooleanObject):
            return bool(value)
        if isinstance(value, NameObject):
            return Name(self._name(value))
        if isinstance(value, TextStringObject):
            return str(value)
        if isinstance(value, ByteStringObject):
            return bytes(value)
        if isinstance(value, StreamObject):
            dictionary = Dictionary(
                (self._name(key), self._convert(item)) for key, item in value.items() if self._name(key) != "Length"
            )
            # Raw still-encoded bytes; pypdf only exposes decoded data publicly.
            return Stream(dictionary=dictionary, data=value._data)
        if isinstance(value, DictionaryObject):
            return Dictionary((self._name(key), self._convert(item)) for key, item in value.items())
        if isinstance(value, ArrayObject):
            return Array(self._convert(item) for item in value)
        if isinstance(value, NumberObject):
            return int(value)
        if isinstance(value, FloatObject):
            return float(value)
        LOGGER.debug("Unsupported object %r converted to null", type(value).__name__)
        return None

    @staticmethod
    def _name(key: str) -> str:
        return key[1:] if key.startswith("/") else key
