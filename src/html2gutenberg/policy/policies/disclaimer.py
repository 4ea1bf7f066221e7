"""Adds a disclaimer block when promotional keywords appear in the text."""

from bs4 import BeautifulSoup, Tag

from ..base import (
    Policy,
    PolicyOptions,
    PolicyResult,
    content_start,
    merge_options,
    success_result,
    warning_result,
)

DEFAULT_OPTIONS: PolicyOptions = {
    "keywords": ["โปรโมชั่น", "ส่วนลด", "ราคาพิเศษ", "ข้อเสนอพิเศษ", "promotion", "discount"],
    "disclaimerHtml": (
        '<div class="disclaimer-block" style="background-color: #fff3cd; border: 1px solid #ffc107; '
        'padding: 15px; margin: 20px 0; border-radius: 5px;">'
        "<strong>Note:</strong> Promotions and special prices mentioned in this article may change. "
        "Please check the latest information before making a decision."
        "</div>"
    ),
    # One of "start", "end", "after-keyword"
    "position": "end",
    "disclaimerClass": "disclaimer-block",
}

POSITIONS = ("start", "end", "after-keyword")


def _insert_after_keyword(soup: BeautifulSoup, nodes: list, keywords: list[str]) -> bool:
    for paragraph in soup.find_all("p"):
        text = paragraph.get_text().lower()
        if any(keyword.lower() in text for keyword in keywords):
            anchor = paragraph
            for node in nodes:
                anchor.insert_after(node)
                anchor = node
            return True
    return False


def apply_disclaimer(html: str, soup: BeautifulSoup, options: PolicyOptions) -> PolicyResult:
    opts = merge_options(DEFAULT_OPTIONS, options)
    keywords = [str(k) for k in opts.get("keywords") or [] if str(k)]
    disclaimer_class = opts.get("disclaimerClass") or ""

    if disclaimer_class and soup.find(class_=disclaimer_class):
        return success_result(html)

    text = (soup.body or soup).get_text(" ").lower()
    found = [keyword for keyword in keywords if keyword.lower() in text]
    if not found:
        return success_result(html)

    fragment = BeautifulSoup(opts.get("disclaimerHtml") or "", "html.parser")
    nodes = list(fragment.contents)
    container: Tag = soup.body or soup
    position = opts.get("position")
    if position not in POSITIONS:
        position = "end"

    if position == "start":
        start = content_start(container)
        for index, node in enumerate(nodes):
            container.insert(start + index, node)
    elif position == "end" or not _insert_after_keyword(soup, nodes, found):
        # after-keyword falls back to the end when no paragraph matches
        for node in nodes:
            container.append(node)

    joined = ", ".join(found)
    return warning_result(
        str(soup),
        [f"Added disclaimer because the text mentions: {joined}"],
        [f"auto-inserted disclaimer for keywords: {joined}"],
    )


disclaimer_policy = Policy(
    name="addDisclaimer",
    description="Insert a disclaimer when promotional keywords are found",
    priority=50,
    apply=apply_disclaimer,
)
