import unittest

from docx_templater.errors import ExtractionError
from docx_templater.extractor import (
    DocxExtractor,
    classify_line,
    convert_plain_text,
    extract_html,
    extract_text,
)

from sample_docs import build_review_docx


class TestDocxExtractor(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.data = build_review_docx()
        cls.html = DocxExtractor(cls.data).to_html()

    def test_headings_follow_word_styles(self):
        self.assertIn("<h1>Casino Review</h1>", self.html)
        self.assertIn("<h1>Welcome Bonus</h1>", self.html)
        self.assertIn("<h2>Deposit Steps</h2>", self.html)

    def test_bold_runs_become_strong(self):
        self.assertIn("<p>Claim <strong>100% up to $200</strong> today.</p>", self.html)

    def test_list_styles_are_grouped(self):
        self.assertIn("<ul><li>Free spins</li><li>Cashback</li></ul>", self.html)
        self.assertIn("<ol><li>Open the cashier</li><li>Choose a method</li></ol>", self.html)

    def test_tables_keep_rows_and_cells(self):
        self.assertIn("<table>", self.html)
        self.assertIn("<td><p>Licence</p></td>", self.html)
        self.assertEqual(self.html.count("<tr>"), 2)

    def test_empty_paragraphs_are_dropped(self):
        self.assertNotIn("<p></p>", self.html)

    def test_document_order_is_preserved(self):
        positions = [
            self.html.index(marker)
            for marker in ("Casino Review", "First intro", "Welcome Bonus", "Free spins", "Licence")
        ]
        self.assertEqual(positions, sorted(positions))

    def test_extract_text_returns_paragraph_lines(self):
        lines = extract_text(self.data).splitlines()
        self.assertEqual(lines[0], "Casino Review")
        self.assertIn("Claim 100% up to $200 today.", lines)

    def test_invalid_archive_raises(self):
        with self.assertRaises(ExtractionError):
            DocxExtractor(b"definitely not a zip file")

    def test_extract_text_rejects_invalid_archive(self):
        with self.assertRaises(ExtractionError):
            extract_text(b"not a docx")


class TestPlainTextConverter(unittest.TestCase):
    def test_line_shapes(self):
        html = convert_plain_text(
            "OVERVIEW\nShort Title Line\nA longer sentence that ends with a period.\n"
        )
        self.assertEqual(
            html.splitlines(),
            [
                "<h2>OVERVIEW</h2>",
                "<h3>Short Title Line</h3>",
                "<p>A longer sentence that ends with a period.</p>",
            ],
        )

    def test_blank_lines_are_skipped(self):
        self.assertEqual(convert_plain_text("\n   \nHello there.\n\n"), "<p>Hello there.</p>")

    def test_long_line_without_punctuation_is_paragraph(self):
        line = "This line has far too many words to be mistaken for any kind of heading"
        self.assertEqual(classify_line(line), "p")

    def test_text_is_escaped(self):
        self.assertEqual(convert_plain_text("Terms & <conditions> apply."),
                         "<p>Terms &amp; &lt;conditions&gt; apply.</p>")


class TestExtractHtml(unittest.TestCase):
    def test_dispatches_on_extension(self):
        self.assertIn("<h1>Casino Review</h1>", extract_html("review.DOCX", build_review_docx()))
        self.assertEqual(extract_html("notes.txt", "FAQ\n".encode("utf-8")), "<h2>FAQ</h2>")

    def test_plain_text_mode_ignores_word_styles(self):
        html = extract_html("review.docx", build_review_docx(), plain_text=True)
        self.assertIn("<h3>Casino Review</h3>", html)

    def test_unsupported_extension(self):
        with self.assertRaises(ExtractionError):
            extract_html("review.pdf", b"%PDF-1.4")

    def test_invalid_utf8_text(self):
        with self.assertRaises(ExtractionError):
            extract_html("notes.txt", b"\xff\xfe\xfa")


if __name__ == "__main__":
    unittest.main()
