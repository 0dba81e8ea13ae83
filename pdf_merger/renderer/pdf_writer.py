"""Serialize a :class:`DocumentGraph` into a PDF file."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Dict, Mapping

from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    ByteStringObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    PdfObject as PypdfObject,
    create_string_object,
)

from pdf_merger.model.document_graph import DocumentGraph
from pdf_merger.model.objects import Name, ObjectId, PdfObject, Reference, Stream
from pdf_merger.utils.errors import SaveError
from pdf_merger.utils.logger import get_logger

LOGGER = get_logger(__name__)

BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"


class PdfFileWriter:
    """Write an object graph as a PDF with a classic cross-reference table."""

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    def render(self, graph: DocumentGraph) -> None:
        """Write ``graph`` to the output path, replacing it atomically."""
        directory = self._output_path.parent
        temp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb", dir=directory, prefix=f".{self._output_path.stem}-", suffix=".tmp", delete=False
            ) as handle:
                temp_name = handle.name
                write_document(graph, handle)
            os.replace(temp_name, self._output_path)
        except OSError as exc:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise SaveError(self._output_path, str(exc)) from exc

        LOGGER.info("Wrote %d objects to %s", len(graph.objects), self._output_path)


def write_document(graph: DocumentGraph, stream: BinaryIO) -> None:
    """Write ``graph`` to a binary ``stream``."""
    start = stream.tell()
    stream.write(f"%PDF-{graph.version}\n".encode("ascii"))
    stream.write(BINARY_MARKER)

    offsets: Dict[ObjectId, int] = {}
    for object_id in sorted(graph.objects):
        number, generation = object_id
        offsets[object_id] = stream.tell() - start
        stream.write(f"{number} {generation} obj\n".encode("ascii"))
        to_pypdf(graph.objects[object_id]).write_to_stream(stream)
        stream.write(b"\nendobj\n")

    xref_offset = stream.tell() - start
    size = max((number for number, _ in offsets), default=0) + 1
    by_number = {number: (offset, generation) for (number, generation), offset in offsets.items()}

    stream.write(f"xref\n0 {size}\n".encode("ascii"))
    stream.write(b"0000000000 65535 f \n")
    for number in range(1, size):
        if number in by_number:
            offset, generation = by_number[number]
            stream.write(f"{offset:010d} {generation:05d} n \n".encode("ascii"))
        else:
            stream.write(b"0000000000 00000 f \n")

    trailer = to_pypdf(graph.trailer)
    trailer[NameObject("/Size")] = NumberObject(size)
    stream.write(b"trailer\n")
    trailer.write_to_stream(stream)
    stream.write(f"\nstartxref\n{xref_offset}\n%%EOF\n".encode("ascii"))


def to_pypdf(value: PdfObject) -> PypdfObject:
    """Convert a model value into the equivalent pypdf generic object."""
    if value is None:
        return NullObject()
    if isinstance(value, Reference):
        number, generation = value.object_id
        return IndirectObject(number, generation, None)
    if isinstance(value, bool):
        return BooleanObject(value)
    if isinstance(value, Name):
        return NameObject(f"/{value}")
    if isinstance(value, str):
        return create_string_object(value)
    if isinstance(value, bytes):
        return ByteStringObject(value)
    if isinstance(value, int):
        return NumberObject(value)
    if isinstance(value, float):
        return FloatObject(value)
    if isinstance(value, Stream):
        stream = DecodedStreamObject()
        stream.update(_dictionary_items(value.dictionary))
        stream.set_data(value.data)
        return stream
    if isinstance(value, dict):
        result = DictionaryObject()
        result.update(_dictionary_items(value))
        return result
    if isinstance(value, list):
        return ArrayObject(to_pypdf(item) for item in value)
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def _dictionary_items(dictionary: Mapping[str, PdfObject]) -> Dict[NameObject, PypdfObject]:
    return {NameObject(f"/{key}"): to_pypdf(item) for key, item in dictionary.items()}
