"""Tests for Google Docs and Word artifact cleanup."""

from bs4 import BeautifulSoup
from html2gutenberg.html.cleaner import (
    CleanerOptions,
    clean_document,
    clean_html,
    remove_google_docs_artifacts,
    remove_word_artifacts,
)


def parse(html):
    return BeautifulSoup(html, "html.parser")


class TestGoogleDocsArtifacts:
    """Tests for remove_google_docs_artifacts."""

    def test_docs_classes_removed(self):
        """Test docs-* classes go while exported style classes stay."""
        soup = parse(remove_google_docs_artifacts('<p class="c1 docs-x">a</p><span class="docs-only">b</span>'))
        assert soup.p["class"] == ["c1"]
        assert not soup.span.has_attr("class")

    def test_docs_attributes_removed(self):
        """Test data-docs-* bookkeeping attributes are dropped."""
        html = '<b id="docs-internal-guid-1" data-docs-delta="1" data-docs-has-only-inline-content="true">a</b>'
        soup = parse(remove_google_docs_artifacts(html))
        assert soup.b.attrs == {"id": "docs-internal-guid-1"}

    def test_empty_bookmark_anchors_removed(self):
        """Test empty id-only anchors go, links and labelled anchors stay."""
        html = (
            '<h2><a id="h.abc"></a>Title</h2>'
            '<p><a id="cmnt_ref1" href="#cmnt1">[a]</a></p>'
            '<p><a id="named">Named</a></p>'
        )
        soup = parse(remove_google_docs_artifacts(html))
        assert [a["id"] for a in soup.find_all("a")] == ["cmnt_ref1", "named"]
        assert soup.h2.get_text() == "Title"


class TestWordArtifacts:
    """Tests for remove_word_artifacts."""

    def test_mso_classes_removed(self):
        """Test Mso* classes go while other classes stay."""
        soup = parse(remove_word_artifacts('<p class="MsoNormal lead">a</p><p class="MsoListParagraph">b</p>'))
        first, second = soup.find_all("p")
        assert first["class"] == ["lead"]
        assert not second.has_attr("class")

    def test_conditional_comments_removed(self):
        """Test <!--[if ...]> blocks go and ordinary comments stay."""
        html = "<!--[if gte mso 9]><xml><o:OfficeDocumentSettings/></xml><![endif]--><p>a</p><!-- keep -->"
        result = remove_word_artifacts(html)
        assert "mso 9" not in result
        assert "OfficeDocumentSettings" not in result
        assert "keep" in result

    def test_plain_comment_starting_with_if_kept(self):
        """Test an ordinary comment is not mistaken for a conditional marker."""
        result = remove_word_artifacts("<p>a</p><!-- if needed, add a photo --><p>b</p>")
        assert "if needed" in result
        assert len(parse(result).find_all("p")) == 2

    def test_revealed_list_bullets_removed(self):
        """Test <![if !supportLists]> blocks go with their content."""
        html = '<p class="MsoListParagraph"><![if !supportLists]><span>·<span> </span></span><![endif]>Item</p>'
        result = remove_word_artifacts(html)
        assert parse(result).p.get_text() == "Item"
        assert "supportLists" not in result
        assert "endif" not in result

    def test_revealed_image_kept(self):
        """Test a revealed block holding an image keeps the image."""
        result = remove_word_artifacts('<p><![if !vml]><img src="a.png"><![endif]></p>')
        assert parse(result).img["src"] == "a.png"
        assert "vml" not in result


class TestCleanHtml:
    """Tests for clean_html."""

    def test_wrapper_tags_unwrapped(self):
        """Test font and o:p are replaced by their content."""
        soup = parse(clean_html('<p><font face="Arial">Hello</font><o:p>&nbsp;</o:p></p>'))
        assert soup.find("font") is None
        assert soup.find("o:p") is None
        assert soup.p.get_text() == "Hello\xa0"

    def test_word_xml_islands_removed(self):
        """Test Word XML blocks are removed with their content."""
        soup = parse(clean_html("<xml><w:WordDocument>x</w:WordDocument></xml><p>a</p>"))
        assert soup.find("xml") is None
        assert soup.get_text() == "a"

    def test_comments_removed(self):
        """Test comments are dropped."""
        assert "<!--" not in clean_html("<p>a<!-- note -->b</p>")

    def test_data_attributes_removed(self):
        """Test data-* attributes go and ids stay by default."""
        soup = parse(clean_html('<p data-foo="1" data-docs-delta="x" id="a">a</p>'))
        assert soup.p.attrs == {"id": "a"}

    def test_remove_ids_option(self):
        """Test ids can be dropped as well."""
        soup = parse(clean_html('<p id="a">a</p>', CleanerOptions(remove_ids=True)))
        assert soup.p.attrs == {}

    def test_empty_spans_and_paragraphs_removed(self):
        """Test elements with no text and no child elements are dropped."""
        html = (
            "<p><span> </span></p>"
            "<p>&nbsp;</p>"
            "<p><br></p>"
            '<p><span><img src="a.png"></span></p>'
            "<p>text</p>"
        )
        soup = parse(clean_html(html))
        assert len(soup.find_all("p")) == 3
        assert len(soup.find_all("span")) == 1
        assert soup.find("br") is not None

    def test_nested_spans_merged(self):
        """Test a span wrapping only a span is folded into it."""
        html = '<p><span style="color: red; margin: 0"><span class="c2" style="color: blue">x</span></span></p>'
        soup = parse(clean_html(html))
        spans = soup.find_all("span")
        assert len(spans) == 1
        assert spans[0]["style"] == "color: blue; margin: 0"
        assert spans[0]["class"] == ["c2"]
        assert spans[0].get_text() == "x"

    def test_span_chain_collapsed(self):
        """Test several levels of wrapper spans collapse into one."""
        html = '<span style="color: red"><span><span style="font-weight: bold">x</span></span></span>'
        soup = parse(clean_html(html))
        assert len(soup.find_all("span")) == 1
        assert soup.span["style"] == "color: red; font-weight: bold"

    def test_span_with_text_not_merged(self):
        """Test a span with text beside its child span is left alone."""
        soup = parse(clean_html('<span style="color: red">a<span style="color: blue">b</span></span>'))
        assert len(soup.find_all("span")) == 2

    def test_whitespace_collapsed(self):
        """Test whitespace runs collapse in block text but not in pre."""
        soup = parse(clean_html("<p>a \n   b</p><pre>a   b</pre>"))
        assert soup.p.get_text() == "a b"
        assert soup.pre.get_text() == "a   b"

    def test_head_styles_and_scripts_kept(self):
        """Test embedded CSS and scripts survive for later steps."""
        html = (
            "<html><head><style>.a { color: red }</style></head>"
            '<body><p class="a">x</p><script>track()</script></body></html>'
        )
        soup = parse(clean_html(html))
        assert soup.style.string == ".a { color: red }"
        assert soup.p["class"] == ["a"]
        assert soup.script is not None

    def test_options_disable_steps(self):
        """Test switched-off steps leave the markup alone."""
        options = CleanerOptions(remove_comments=False, remove_empty_paragraphs=False, unwrap_tags=())
        result = clean_html("<p></p><!-- note --><font>a</font>", options)
        soup = parse(result)
        assert soup.p is not None
        assert soup.font is not None
        assert "note" in result


class TestCleanDocument:
    """Tests for clean_document."""

    def test_mixed_export(self):
        """Test a document with Google Docs and Word noise comes out clean."""
        html = (
            "<!--[if gte mso 9]><xml><o:DocumentProperties/></xml><![endif]-->"
            '<h2><a id="h.1"></a>Heading</h2>'
            '<p class="MsoNormal c1 docs-x" data-docs-delta="1"><span><span>Text</span></span><o:p></o:p></p>'
            "<p class=MsoNormal><o:p>&nbsp;</o:p></p>"
        )
        soup = parse(clean_document(html))
        assert soup.find("a") is None
        assert [p.get("class") for p in soup.find_all("p")] == [["c1"]]
        assert soup.p.attrs == {"class": ["c1"]}
        assert len(soup.find_all("span")) == 1
        assert soup.p.get_text() == "Text"
