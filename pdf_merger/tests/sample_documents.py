"""Builders for small in-memory documents and PDF files used across the tests."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pypdf import PdfWriter

from pdf_merger.model.document_graph import DocumentGraph
from pdf_merger.model.objects import Array, Dictionary, Name, Reference, Stream


def make_document(page_count: int, *, outline_title: Optional[str] = None, version: str = "1.4") -> DocumentGraph:
    """Catalog (1 0), Pages (2 0), then a Page and content stream per page.

    With ``outline_title`` an Outlines dictionary and a single outline item
    pointing at the first page are appended and linked from the Catalog.
    """
    objects = {}
    kids = Array()
    next_number = 3
    for index in range(page_count):
        page_id = (next_number, 0)
        contents_id = (next_number + 1, 0)
        objects[page_id] = Dictionary(
            Type=Name("Page"),
            Parent=Reference((2, 0)),
            MediaBox=Array([0, 0, 100 * (index + 1), 100]),
            Contents=Reference(contents_id),
        )
        objects[contents_id] = Stream(Dictionary(), f"BT ({index}) Tj ET".encode("ascii"))
        kids.append(Reference(page_id))
        next_number += 2

    catalog = Dictionary(Type=Name("Catalog"), Pages=Reference((2, 0)))
    objects[(1, 0)] = catalog
    objects[(2, 0)] = Dictionary(Type=Name("Pages"), Kids=kids, Count=page_count)

    if outline_title is not None:
        outlines_id = (next_number, 0)
        item_id = (next_number + 1, 0)
        objects[outlines_id] = Dictionary(
            Type=Name("Outlines"), First=Reference(item_id), Last=Reference(item_id), Count=1
        )
        item = Dictionary(Title=outline_title, Parent=Reference(outlines_id))
        if kids:
            item["Dest"] = Array([kids[0], Name("Fit")])
        objects[item_id] = item
        catalog["Outlines"] = Reference(outlines_id)

    return DocumentGraph(objects, Dictionary(Root=Reference((1, 0))), version=version)


def write_sample_pdf(
    path: Path,
    page_count: int,
    *,
    width: float = 200,
    outline_title: Optional[str] = None,
    password: Optional[str] = None,
) -> Path:
    """Write a PDF of blank pages with pypdf."""
    writer = PdfWriter()
    for _ in range(page_count):
        writer.add_blank_page(width=width, height=300)
    if outline_title is not None and page_count:
        writer.add_outline_item(outline_title, 0)
    if password is not None:
        writer.encrypt(password)
    with open(path, "wb") as handle:
        writer.write(handle)
    return path
