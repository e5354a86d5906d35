import unittest

from docx_templater.editor import SectionEditor
from docx_templater.errors import InvalidSectionsError, SectionNotFoundError, UnknownStyleError
from docx_templater.sections import Section, sections_from_json, sections_to_json


HTML = "<h2>Top Picks</h2><p>First paragraph.</p><ul><li>One</li></ul><p>Last paragraph.</p>"


class TestSectionEditor(unittest.TestCase):
    def setUp(self):
        self.editor = SectionEditor.from_html(HTML)

    def ids(self):
        return [s.id for s in self.editor.ordered()]

    def test_render_is_idempotent(self):
        self.assertEqual(self.editor.render(), self.editor.render())

    def test_reparsing_the_same_content_renders_identically(self):
        self.assertEqual(SectionEditor.from_html(HTML).render(), self.editor.render())

    def test_saved_state_renders_identically(self):
        self.editor.assign_style("section-1", "hero")
        self.editor.move_up("section-2")
        saved = sections_to_json(self.editor.ordered())
        restored = SectionEditor(sections_from_json(saved))
        self.assertEqual(restored.render(), self.editor.render())

    def test_render_wraps_sections_in_their_styles(self):
        page = self.editor.render()
        self.assertIn('<h2 class="section-heading"><h2>Top Picks</h2></h2>', page)
        self.assertIn('<div class="body-text"><p>First paragraph.</p></div>', page)
        self.assertIn('<ul class="feature-list__items">', page)
        self.assertIn('<link rel="stylesheet" href="/css/styling-test-page-fixed.css">', page)
        self.assertIn('[elementor-template id="1128"]', page)

    def test_assign_style(self):
        self.editor.assign_style("section-1", "hero")
        self.assertIn('<div class="hero-section__content">\n          <p>First paragraph.</p>', self.editor.render())

    def test_any_style_can_be_applied_to_any_section(self):
        self.editor.assign_style("section-0", "comparisonTable")
        self.assertEqual(self.editor.get("section-0").style_id, "comparisonTable")

    def test_unknown_style_is_rejected(self):
        with self.assertRaises(UnknownStyleError):
            self.editor.assign_style("section-1", "sparkles")
        self.assertEqual(self.editor.get("section-1").style_id, "body")

    def test_unknown_section(self):
        with self.assertRaises(SectionNotFoundError):
            self.editor.assign_style("section-99", "body")
        with self.assertRaises(SectionNotFoundError):
            self.editor.move_up("section-99")

    def test_up_then_down_restores_order(self):
        before = self.ids()
        self.editor.move_up("section-2")
        self.assertEqual(self.ids(), ["section-0", "section-2", "section-1", "section-3"])
        self.editor.move_down("section-2")
        self.assertEqual(self.ids(), before)

    def test_moves_keep_order_values(self):
        self.editor.move("section-3", -3)
        self.assertEqual(self.ids(), ["section-3", "section-0", "section-1", "section-2"])
        self.assertEqual([s.order for s in self.editor.ordered()], [0, 1, 2, 3])

    def test_moves_past_the_ends_are_noops(self):
        before = self.ids()
        self.editor.move_up("section-0")
        self.editor.move_down("section-3")
        self.assertEqual(self.ids(), before)

    def test_render_follows_order(self):
        self.editor.move_down("section-1")
        page = self.editor.render()
        self.assertLess(page.index("<li>One</li>"), page.index("First paragraph."))

    def test_delete_removes_from_output(self):
        removed = self.editor.delete("section-1")
        self.assertEqual(removed.content, "First paragraph.")
        self.assertNotIn("First paragraph.", self.editor.render())
        with self.assertRaises(SectionNotFoundError):
            self.editor.get("section-1")

    def test_delete_leaves_gaps(self):
        self.editor.delete("section-1")
        self.assertEqual([s.order for s in self.editor.ordered()], [0, 2, 3])
        self.editor.move_up("section-2")
        self.assertEqual(self.ids(), ["section-2", "section-0", "section-3"])
        self.assertEqual([s.order for s in self.editor.ordered()], [0, 2, 3])

    def test_unknown_style_in_state_renders_raw_html(self):
        editor = SectionEditor(
            [Section("section-0", "group", "x", "<div>raw</div>", "notAStyle", 0)]
        )
        self.assertIn("<div>raw</div>", editor.render())
        self.assertNotIn("body-text", editor.render())

    def test_apply_suggestions_replaces_state(self):
        suggested = [Section("section-0", "group", "All", "<div>All</div>", "platformCard", 0)]
        self.editor.apply_suggestions(suggested)
        self.assertEqual(len(self.editor), 1)
        self.assertEqual(self.editor.render().count("platform-card__content"), 1)

    def test_duplicate_orders_are_rejected(self):
        sections = [
            Section("a", "paragraph", "A", "<p>A</p>", "body", 0),
            Section("b", "paragraph", "B", "<p>B</p>", "body", 0),
        ]
        with self.assertRaises(InvalidSectionsError):
            SectionEditor(sections)

    def test_duplicate_ids_are_rejected(self):
        sections = [
            Section("a", "paragraph", "A", "<p>A</p>", "body", 0),
            Section("a", "paragraph", "B", "<p>B</p>", "body", 1),
        ]
        with self.assertRaises(ValueError):
            SectionEditor(sections)

    def test_invalid_suggestions_keep_previous_state(self):
        before = self.editor.render()
        suggested = [
            Section("section-0", "group", "A", "<div>A</div>", "body", 0),
            Section("section-1", "group", "B", "<div>B</div>", "body", 0),
        ]
        with self.assertRaises(InvalidSectionsError):
            self.editor.apply_suggestions(suggested)
        self.assertEqual(self.editor.render(), before)


if __name__ == "__main__":
    unittest.main()
