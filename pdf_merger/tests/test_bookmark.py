"""Tests for the bookmark forest and its outline materialization."""
import unittest

from pdf_merger.model.bookmark import Bookmark, BookmarkForest, BookmarkStyle
from pdf_merger.model.document_graph import DocumentGraph
from pdf_merger.model.objects import Dictionary, Name, Reference


class BookmarkForestTest(unittest.TestCase):
    """Forest bookkeeping and zero-target repair."""

    def setUp(self) -> None:
        self.forest = BookmarkForest()
        self.root = self.forest.add_bookmark(Bookmark(title="Root"))
        self.first = self.forest.add_bookmark(Bookmark(title="First", target=(3, 0)), self.root)
        self.nested = self.forest.add_bookmark(Bookmark(title="Nested"), self.first)
        self.second = self.forest.add_bookmark(Bookmark(title="Second", target=(7, 0)))

    def test_preorder_visits_children_before_siblings(self) -> None:
        self.assertEqual(list(self.forest.iter_preorder()), [self.root, self.first, self.nested, self.second])
        self.assertEqual(self.forest.roots, [self.root, self.second])
        self.assertEqual(self.forest.get(self.nested).parent, self.first)

    def test_unknown_parent_rejected(self) -> None:
        with self.assertRaises(KeyError):
            self.forest.add_bookmark(Bookmark(title="Orphan"), 99)

    def test_adjust_zero_pages_prefers_descendant(self) -> None:
        self.forest.adjust_zero_pages()
        self.assertEqual(self.forest.get(self.root).target, (3, 0))

    def test_adjust_zero_pages_falls_back_to_next_bookmark(self) -> None:
        self.forest.adjust_zero_pages()
        self.assertEqual(self.forest.get(self.nested).target, (7, 0))

    def test_trailing_bookmark_without_page_keeps_no_target(self) -> None:
        tail = self.forest.add_bookmark(Bookmark(title="Tail"))
        self.forest.adjust_zero_pages()
        self.assertIsNone(self.forest.get(tail).target)


class MaterializeTest(unittest.TestCase):
    """The forest becomes an Outlines dictionary with linked items."""

    def setUp(self) -> None:
        self.graph = DocumentGraph({(1, 0): Dictionary(Type=Name("Page")), (2, 0): Dictionary(Type=Name("Page"))})
        root = self.graph.add_bookmark(Bookmark(title="Root", target=(1, 0)))
        self.graph.add_bookmark(Bookmark(title="A", target=(1, 0)), root)
        self.graph.add_bookmark(Bookmark(title="B", target=(2, 0), style=BookmarkStyle.BOLD | BookmarkStyle.ITALIC), root)
        self.graph.add_bookmark(Bookmark(title="Tail"))

    def test_outline_structure(self) -> None:
        outlines_id = self.graph.build_outline()

        self.assertEqual(outlines_id, (3, 0))
        outlines = self.graph.get_object(outlines_id)
        self.assertEqual(outlines["Type"], "Outlines")
        self.assertEqual(outlines["First"], Reference((4, 0)))
        self.assertEqual(outlines["Last"], Reference((7, 0)))
        self.assertEqual(outlines["Count"], 4)

        root = self.graph.get_object((4, 0))
        self.assertEqual(root["Title"], "Root")
        self.assertEqual(root["Parent"], Reference(outlines_id))
        self.assertEqual(root["Next"], Reference((7, 0)))
        self.assertNotIn("Prev", root)
        self.assertEqual(root["First"], Reference((5, 0)))
        self.assertEqual(root["Last"], Reference((6, 0)))
        self.assertEqual(root["Count"], 2)
        self.assertEqual(root["Dest"], [Reference((1, 0)), "Fit"])
        self.assertEqual(root["C"], [0.0, 0.0, 0.0])
        self.assertNotIn("F", root)

        styled = self.graph.get_object((6, 0))
        self.assertEqual(styled["Prev"], Reference((5, 0)))
        self.assertEqual(styled["Parent"], Reference((4, 0)))
        self.assertEqual(styled["F"], 3)

    def test_bookmark_without_target_has_no_destination(self) -> None:
        self.graph.build_outline()
        tail = self.graph.get_object((7, 0))
        self.assertNotIn("Dest", tail)
        self.assertEqual(tail["Prev"], Reference((4, 0)))

    def test_empty_forest_builds_nothing(self) -> None:
        self.assertIsNone(DocumentGraph().build_outline())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
