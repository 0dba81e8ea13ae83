"""Tests for the position-driven bookmark nesting rule."""
import unittest

from pdf_merger.merger.outline_builder import TOC_TITLE, LayerState, LayerTransition, OutlineBuilder
from pdf_merger.model.document_graph import DocumentGraph


class LayerStateTest(unittest.TestCase):
    """Each row of the nesting rule, exercised on explicit states."""

    def test_initial_state(self) -> None:
        state = LayerState.initial(root_id=1, document_count=3)
        self.assertEqual(state.last_layer, 0)
        self.assertEqual(state.layer_parent, (1, None, None, None))

    def test_first_layer_hangs_under_root(self) -> None:
        state = LayerState(last_layer=0, layer_parent=(1, None, None))
        self.assertEqual(state.transition(1), LayerTransition(parent=1, slot=1, last_layer=1))

    def test_following_layer_reads_previous_slot(self) -> None:
        state = LayerState(last_layer=1, layer_parent=(1, 2, None))
        self.assertEqual(state.transition(2), LayerTransition(parent=2, slot=1, last_layer=2))

    def test_layer_not_above_last_reads_its_slot(self) -> None:
        state = LayerState(last_layer=3, layer_parent=(1, 5, 6, 7, None))
        self.assertEqual(state.transition(2), LayerTransition(parent=5, slot=1, last_layer=2))

    def test_skipping_ahead_keeps_last_layer(self) -> None:
        state = LayerState(last_layer=2, layer_parent=(1, 3, 4, None, None))
        self.assertEqual(state.transition(4), LayerTransition(parent=3, slot=2, last_layer=2))

    def test_skipping_ahead_from_nothing_restarts_at_root(self) -> None:
        state = LayerState(last_layer=0, layer_parent=(1, None, None, None))
        self.assertEqual(state.transition(3), LayerTransition(parent=1, slot=1, last_layer=1))

    def test_record_returns_new_state(self) -> None:
        state = LayerState(last_layer=1, layer_parent=(1, 2, None))
        updated = state.record(LayerTransition(parent=2, slot=1, last_layer=2), bookmark_id=9)
        self.assertEqual(updated, LayerState(last_layer=2, layer_parent=(1, 9, None)))
        self.assertEqual(state.layer_parent, (1, 2, None))


class OutlineBuilderTest(unittest.TestCase):
    """Bookmarks created for a sequence of documents."""

    def setUp(self) -> None:
        self.graph = DocumentGraph()
        self.builder = OutlineBuilder(self.graph, document_count=3)

    def test_three_single_page_documents(self) -> None:
        first = self.builder.add_document(1, (3, 0))
        second = self.builder.add_document(2, (7, 0))
        third = self.builder.add_document(3, (11, 0))

        forest = self.graph.bookmarks
        root = forest.get(self.builder.root_id)
        self.assertEqual(root.title, TOC_TITLE)
        self.assertIsNone(root.target)

        self.assertEqual(forest.get(first).parent, self.builder.root_id)
        self.assertEqual(forest.get(second).parent, first)
        # Layer 3 reads slot 2, which no earlier document filled.
        self.assertIsNone(forest.get(third).parent)
        self.assertEqual(forest.roots, [self.builder.root_id, third])

        self.assertEqual([forest.get(b).title for b in (first, second, third)], ["Page 1", "Page 2", "Page 3"])
        self.assertEqual(self.builder.state, LayerState(last_layer=3, layer_parent=(1, second, third, None)))

    def test_document_without_pages_does_not_consume_a_title(self) -> None:
        self.builder.add_document(1, (3, 0))
        empty = self.builder.add_document(2, None)
        last = self.builder.add_document(3, (9, 0))

        forest = self.graph.bookmarks
        self.assertEqual(forest.get(empty).title, "")
        self.assertIsNone(forest.get(empty).target)
        self.assertEqual(forest.get(last).title, "Page 2")

    def test_bookmarks_use_default_appearance(self) -> None:
        bookmark = self.graph.bookmarks.get(self.builder.add_document(1, (3, 0)))
        self.assertEqual(bookmark.color, (0.0, 0.0, 0.0))
        self.assertEqual(int(bookmark.style), 0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
