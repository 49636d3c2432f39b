"""
Unit tests for html_converter.py

Tests filename sanitizing and DOCX export plumbing.
"""
import unittest
import sys
import os
import tempfile
from unittest.mock import MagicMock, patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import html_converter
from html_builder import DocumentOptions, InvalidArgumentError


class TestSanitizeFilenameForFormat(unittest.TestCase):
    """Test format-specific filename sanitization."""

    def test_html_extension(self):
        """Test HTML extension is applied."""
        result = html_converter.sanitize_filename_for_format("test", ".html")
        self.assertEqual(result, "test.html")

    def test_replaces_existing_extension(self):
        """Test existing extension is replaced."""
        result = html_converter.sanitize_filename_for_format("site.html", ".docx")
        self.assertEqual(result, "site.docx")

    def test_non_output_extension_kept(self):
        """Test only extensions this tool writes are replaced."""
        result = html_converter.sanitize_filename_for_format("notes.md", ".html")
        self.assertEqual(result, "notes.md.html")

    def test_directory_parts_dropped(self):
        result = html_converter.sanitize_filename_for_format("../../evil.html", ".docx")
        self.assertEqual(result, "evil.docx")

    def test_document_filename_uses_title(self):
        options = DocumentOptions(title="Annual  Report", body_content="x")
        self.assertEqual(html_converter.document_filename(options, ".docx"), "Annual_Report.docx")

    def test_empty_name(self):
        """Test empty name gets default."""
        result = html_converter.sanitize_filename_for_format("", ".docx")
        self.assertEqual(result, "document.docx")

    def test_only_punctuation(self):
        """Test a name with nothing usable left gets default."""
        result = html_converter.sanitize_filename_for_format("../<>", ".html")
        self.assertEqual(result, "document.html")

    def test_special_chars_removed(self):
        """Test special characters are removed."""
        result = html_converter.sanitize_filename_for_format("test<>file", ".html")
        self.assertEqual(result, "testfile.html")

    def test_whitespace_collapsed(self):
        result = html_converter.sanitize_filename_for_format("  My   Site ", ".html")
        self.assertEqual(result, "My_Site.html")

    def test_byte_limit_respected(self):
        """Test filename respects byte limits."""
        long_name = "文" * 100  # 300 bytes in UTF-8
        result = html_converter.sanitize_filename_for_format(long_name, ".docx")
        self.assertLessEqual(len(result.encode('utf-8')), 255)
        self.assertTrue(result.endswith('.docx'))


class TestCheckDocxDependencies(unittest.TestCase):
    """Test dependency checking."""

    def test_returns_tuple(self):
        """Test function returns a (bool, str) tuple."""
        available, error = html_converter.check_docx_dependencies()
        self.assertIsInstance(available, bool)
        self.assertIsInstance(error, str)

    def test_missing_pypandoc(self):
        with patch.object(html_converter, "HAS_PYPANDOC", False):
            available, error = html_converter.check_docx_dependencies()
        self.assertFalse(available)
        self.assertIn("pypandoc", error)

    def test_missing_pandoc_binary(self):
        with patch.object(html_converter, "HAS_PYPANDOC", True), \
                patch.object(html_converter.shutil, "which", return_value=None):
            available, error = html_converter.check_docx_dependencies()
        self.assertFalse(available)
        self.assertIn("pandoc is not found", error)


def fake_pandoc(payload=b"PK-docx"):
    """A pypandoc stand-in whose convert_text writes `payload` to outputfile."""
    mock_pandoc = MagicMock()

    def convert_text(source, to, format, outputfile, extra_args):
        with open(outputfile, "wb") as f:
            f.write(payload)

    mock_pandoc.convert_text.side_effect = convert_text
    return mock_pandoc


class TestConvertHtmlToDocx(unittest.TestCase):
    """Test DOCX conversion."""

    def test_raises_import_error_without_dependencies(self):
        with patch.object(html_converter, "check_docx_dependencies", return_value=(False, "missing")):
            with self.assertRaises(ImportError):
                html_converter.convert_html_to_docx("<p>x</p>")

    def test_pandoc_failure_becomes_runtime_error(self):
        mock_pandoc = MagicMock()
        mock_pandoc.convert_text.side_effect = RuntimeError("bad input")
        with patch.object(html_converter, "check_docx_dependencies", return_value=(True, "")), \
                patch.object(html_converter, "pypandoc", mock_pandoc):
            with self.assertRaises(RuntimeError) as ctx:
                html_converter.convert_html_to_docx("<p>x</p>")
        self.assertIn("Pandoc could not convert the page", str(ctx.exception))

    def test_title_passed_as_metadata(self):
        """Test the page title becomes the DOCX title metadata."""
        mock_pandoc = fake_pandoc()
        with patch.object(html_converter, "check_docx_dependencies", return_value=(True, "")), \
                patch.object(html_converter, "pypandoc", mock_pandoc):
            html_converter.convert_html_to_docx("<p>x</p>", title="Quarterly Report")
        kwargs = mock_pandoc.convert_text.call_args.kwargs
        self.assertEqual(kwargs["format"], "html")
        self.assertIn("--metadata=title:Quarterly Report", kwargs["extra_args"])

    def test_no_title_no_metadata(self):
        mock_pandoc = fake_pandoc()
        with patch.object(html_converter, "check_docx_dependencies", return_value=(True, "")), \
                patch.object(html_converter, "pypandoc", mock_pandoc):
            html_converter.convert_html_to_docx("<p>x</p>")
        extra_args = mock_pandoc.convert_text.call_args.kwargs["extra_args"]
        self.assertFalse(any(arg.startswith("--metadata") for arg in extra_args))

    def test_writes_output(self):
        """Test converted bytes are returned and written to output_path."""
        with patch.object(html_converter, "check_docx_dependencies", return_value=(True, "")), \
                patch.object(html_converter, "pypandoc", fake_pandoc()):
            with tempfile.TemporaryDirectory() as tmpdir:
                out = os.path.join(tmpdir, "site.docx")
                result = html_converter.convert_html_to_docx("<p>x</p>", output_path=out)
                with open(out, "rb") as f:
                    self.assertEqual(f.read(), b"PK-docx")
        self.assertEqual(result, b"PK-docx")


class TestExportDocx(unittest.TestCase):
    """Test exporting DocumentOptions straight to DOCX."""

    def test_named_after_title(self):
        options = DocumentOptions(title="Team Page", body_content="Hello")
        mock_pandoc = fake_pandoc()
        with patch.object(html_converter, "check_docx_dependencies", return_value=(True, "")), \
                patch.object(html_converter, "pypandoc", mock_pandoc):
            with tempfile.TemporaryDirectory() as tmpdir:
                filename, data = html_converter.export_docx(options, output_dir=tmpdir)
                self.assertTrue(os.path.exists(os.path.join(tmpdir, "Team_Page.docx")))
        self.assertEqual(filename, "Team_Page.docx")
        self.assertEqual(data, b"PK-docx")
        source = mock_pandoc.convert_text.call_args.args[0]
        self.assertIn("<title>Team Page</title>", source)
        self.assertIn("--metadata=title:Team Page", mock_pandoc.convert_text.call_args.kwargs["extra_args"])

    def test_invalid_options_rejected_before_pandoc(self):
        mock_pandoc = fake_pandoc()
        with patch.object(html_converter, "check_docx_dependencies", return_value=(True, "")), \
                patch.object(html_converter, "pypandoc", mock_pandoc):
            with self.assertRaises(InvalidArgumentError):
                html_converter.export_docx(DocumentOptions(title="T"))
        mock_pandoc.convert_text.assert_not_called()


if __name__ == "__main__":
    unittest.main()
