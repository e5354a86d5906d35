import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from docx_templater.cli import main

from sample_docs import build_review_docx


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.source = Path(self.tmp.name) / "Review.docx"
        self.source.write_bytes(build_review_docx())

    def run_cli(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_convert_writes_html_file(self):
        out_dir = Path(self.tmp.name) / "out"
        code, _ = self.run_cli("convert", str(self.source), "--mode", "single", "-o", str(out_dir))
        self.assertEqual(code, 0)
        page = (out_dir / "Review.html").read_text(encoding="utf-8")
        self.assertIn("<h1>Casino Review</h1>", page)

    def test_convert_prints_to_stdout(self):
        code, output = self.run_cli("convert", str(self.source))
        self.assertEqual(code, 0)
        self.assertIn("[elementor-template id=", output)

    def test_sections_and_render(self):
        code, output = self.run_cli("sections", str(self.source))
        self.assertEqual(code, 0)
        sections = json.loads(output)
        self.assertEqual(sections[0]["content"], "Casino Review")

        sections_path = Path(self.tmp.name) / "sections.json"
        sections_path.write_text(output, encoding="utf-8")
        code, page = self.run_cli("render", str(sections_path))
        self.assertEqual(code, 0)
        self.assertIn('<h2 class="section-heading"><h1>Casino Review</h1></h2>', page)

    def test_missing_file_exits_with_error(self):
        code, output = self.run_cli("convert", str(Path(self.tmp.name) / "missing.docx"))
        self.assertEqual(code, 1)
        self.assertEqual(output, "")

    def test_render_missing_sections_file(self):
        code, output = self.run_cli("render", str(Path(self.tmp.name) / "missing.json"))
        self.assertEqual(code, 1)
        self.assertEqual(output, "")

    def test_render_malformed_sections_file(self):
        path = Path(self.tmp.name) / "sections.json"
        for text in ("not json", '[{"type": "paragraph"}]', '{"sections": 1}'):
            path.write_text(text, encoding="utf-8")
            code, output = self.run_cli("render", str(path))
            self.assertEqual(code, 1, text)
            self.assertEqual(output, "")

    def test_render_duplicate_orders(self):
        path = Path(self.tmp.name) / "sections.json"
        item = {"type": "paragraph", "content": "A", "htmlContent": "<p>A</p>", "order": 0}
        path.write_text(json.dumps([dict(item, id="a"), dict(item, id="b")]), encoding="utf-8")
        code, _ = self.run_cli("render", str(path))
        self.assertEqual(code, 1)

    def test_keep_pros_cons(self):
        source = Path(self.tmp.name) / "review.txt"
        source.write_text(
            "Spin Palace Review\nIntro one.\nIntro two.\nPros and Cons\nFast payouts all round.\n",
            encoding="utf-8",
        )
        _, dropped = self.run_cli("convert", str(source), "--mode", "single")
        code, kept = self.run_cli("convert", str(source), "--mode", "single", "--keep-pros-cons")
        self.assertEqual(code, 0)
        self.assertNotIn("Fast payouts", dropped)
        self.assertIn("Fast payouts", kept)


if __name__ == "__main__":
    unittest.main()
