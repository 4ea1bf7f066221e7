"""Tests for the conversion orchestrator and HTML loader."""

from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from html2gutenberg.converter import convert
from html2gutenberg.errors import DocumentLoadError, DocumentParseError
from html2gutenberg.loader import decode_bytes, load_html, load_linked_css, looks_like_html
from html2gutenberg.models.config import ConverterConfig

ARTICLE = """<!DOCTYPE html>
<html>
<head>
<style>
.lead { color: red; }
h2 { font-size: 24px; }
</style>
</head>
<body>
<h2>Heading</h2>
<p class="lead">Intro text</p>
<script>track()</script>
<p>To Team Web: add banner</p>
</body>
</html>
"""


class TestConvert:
    """Tests for convert."""

    def test_default_conversion(self):
        """Test styles are inlined, style tags and forbidden tags removed."""
        result = convert(ARTICLE)
        soup = BeautifulSoup(result.html, "html.parser")

        assert soup.find("style") is None
        assert soup.find("script") is None
        assert soup.find("p")["style"] == "color: red"
        assert soup.find("h2")["style"] == "font-size: 24px"
        assert not soup.find("p").has_attr("class")
        assert result.report.success
        assert "forbiddenTags" in result.report.policies_triggered

    def test_default_config_leaves_notes(self):
        """Test removeInternalNotes is listed but disabled by default."""
        result = convert(ARTICLE)
        assert "To Team Web" in result.html

    def test_configured_policies(self):
        """Test policies from the config are applied."""
        config = ConverterConfig(policies={"removeInternalNotes": True})
        result = convert(ARTICLE, config)
        assert "To Team Web" not in result.html
        assert "<script>" in result.html
        assert result.report.policies_triggered == ["removeInternalNotes"]

    def test_export_artifacts_cleaned(self):
        """Test Word and Google Docs noise is removed before inlining."""
        html = (
            "<html><head><style>.lead { color: red; }</style></head><body>"
            "<h2>Heading</h2>"
            '<p class="MsoNormal lead" data-docs-delta="1"><font>Intro</font><o:p></o:p></p>'
            "<p class=MsoNormal><o:p>&nbsp;</o:p></p>"
            "</body></html>"
        )
        result = convert(html)
        soup = BeautifulSoup(result.html, "html.parser")
        paragraphs = soup.find_all("p")
        assert len(paragraphs) == 1
        assert paragraphs[0].attrs == {"style": "color: red"}
        assert soup.find("font") is None

    def test_cleaning_disabled(self):
        """Test clean_html false keeps export artifacts."""
        html = '<h2>A</h2><p data-note="1">x</p><p></p>'
        result = convert(html, ConverterConfig(clean_html=False))
        soup = BeautifulSoup(result.html, "html.parser")
        assert soup.p["data-note"] == "1"
        assert len(soup.find_all("p")) == 2

    def test_inline_styles_disabled(self):
        """Test classes are kept and styles not inlined when disabled."""
        result = convert(ARTICLE, ConverterConfig(inline_styles=False))
        soup = BeautifulSoup(result.html, "html.parser")
        assert soup.find("p")["class"] == ["lead"]
        assert not soup.find("p").has_attr("style")
        assert soup.find("style") is None

    def test_keep_classes(self):
        """Test keep_classes survives inlining."""
        result = convert(ARTICLE, ConverterConfig(keep_classes=True))
        soup = BeautifulSoup(result.html, "html.parser")
        assert soup.find("p")["class"] == ["lead"]
        assert soup.find("p")["style"] == "color: red"

    def test_extra_css(self):
        """Test extra stylesheet text is applied after embedded CSS."""
        result = convert(ARTICLE, css=".lead { color: blue; margin: 0 }")
        soup = BeautifulSoup(result.html, "html.parser")
        assert soup.find("p")["style"] == "color: blue; margin: 0"

    def test_strict_failure(self):
        """Test strict mode reports failure."""
        config = ConverterConfig(mode="strict", policies={"minImageCount": {"options": {"minCount": 1}}})
        result = convert(ARTICLE, config)
        assert not result.report.success
        assert result.report.failed_policies == ["minImageCount"]

    def test_report_identifiers(self):
        """Test source and output paths go into the report."""
        result = convert("<p>x</p>", source_path=Path("in.html"), output_path="out.html")
        assert result.report.input_file == "in.html"
        assert result.report.output_file == "out.html"

    def test_unparseable_document(self):
        """Test non-text input is fatal with a report."""
        with pytest.raises(DocumentParseError) as exc_info:
            convert(None)
        assert exc_info.value.report.success is False
        assert exc_info.value.report.input_file == "(string input)"


class TestLoader:
    """Tests for loading HTML and linked stylesheets."""

    def test_looks_like_html(self):
        """Test markup detection."""
        assert looks_like_html("  <p>x</p>")
        assert looks_like_html("text <!DOCTYPE html>")
        assert not looks_like_html("article.html")

    def test_load_string(self):
        """Test literal markup is returned as-is."""
        document = load_html("<p>x</p>")
        assert document.html == "<p>x</p>"
        assert document.source_path is None
        assert document.base_dir is None

    def test_load_file(self, tmp_path):
        """Test loading from a file path string or Path."""
        path = tmp_path / "a.html"
        path.write_text("<p>ไทย</p>", encoding="utf-8")
        assert load_html(str(path)).html == "<p>ไทย</p>"
        document = load_html(path)
        assert document.source_path == path.resolve()
        assert document.base_dir == path.resolve().parent

    def test_missing_file(self, tmp_path):
        """Test missing files raise DocumentLoadError."""
        with pytest.raises(DocumentLoadError):
            load_html(tmp_path / "missing.html")

    def test_declared_charset(self):
        """Test non-UTF-8 bytes use the declared charset."""
        data = '<meta charset="windows-1252"><p>caf\xe9</p>'.encode("cp1252")
        assert "café" in decode_bytes(data)

    def test_linked_css(self, tmp_path):
        """Test local stylesheets are read and remote ones skipped."""
        (tmp_path / "style.css").write_text(".a { color: red }")
        html = (
            '<link rel="stylesheet" href="style.css">'
            '<link rel="stylesheet" href="https://cdn.example.com/x.css">'
            '<link rel="stylesheet" href="missing.css">'
            '<link rel="icon" href="favicon.ico">'
        )
        assert load_linked_css(html, tmp_path) == ".a { color: red }"

    def test_linked_css_without_base_dir(self):
        """Test literal strings have no linked CSS."""
        assert load_linked_css('<link rel="stylesheet" href="style.css">', None) == ""
