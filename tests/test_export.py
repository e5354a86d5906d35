import tempfile
import unittest
from pathlib import Path

from docx_templater.export import DEFAULT_EXPORT_NAME, export_filename, write_export


class TestExport(unittest.TestCase):
    def test_extension_is_replaced(self):
        self.assertEqual(export_filename("Spin Palace.docx"), "Spin Palace.html")
        self.assertEqual(export_filename("notes.txt"), "notes.html")
        self.assertEqual(export_filename("uploads/review.v2.docx"), "review.v2.html")

    def test_missing_name_uses_default(self):
        self.assertEqual(export_filename(None), DEFAULT_EXPORT_NAME)
        self.assertEqual(export_filename(""), DEFAULT_EXPORT_NAME)

    def test_write_export(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = write_export("<p>é</p>", Path(tmp) / "nested", "review.docx")
            self.assertEqual(path.name, "review.html")
            self.assertEqual(path.read_text(encoding="utf-8"), "<p>é</p>")


if __name__ == "__main__":
    unittest.main()
