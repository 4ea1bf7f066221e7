"""Ensures the document has a minimum number of H2 headings."""

from bs4 import BeautifulSoup

from ..base import (
    Policy,
    PolicyOptions,
    PolicyResult,
    content_start,
    failed_result,
    merge_options,
    success_result,
    warning_result,
)

DEFAULT_OPTIONS: PolicyOptions = {
    "minCount": 1,
    "autoGenerate": False,
    "defaultHeadingText": "Section",
}


def apply_require_h2(html: str, soup: BeautifulSoup, options: PolicyOptions) -> PolicyResult:
    opts = merge_options(DEFAULT_OPTIONS, options)
    min_count = int(opts.get("minCount") or 0)

    current = len(soup.find_all("h2"))
    if current >= min_count:
        return success_result(html)

    missing = min_count - current

    if not opts.get("autoGenerate"):
        return failed_result(
            html,
            [f"Document must contain at least {min_count} H2 heading(s) (found {current})"],
        )

    first_paragraph = soup.find("p")
    container = soup.body or soup
    start = content_start(container)
    for i in range(missing):
        heading = soup.new_tag("h2")
        heading.string = f"{opts.get('defaultHeadingText')} {current + i + 1}"
        if first_paragraph is not None:
            first_paragraph.insert_before(heading)
        else:
            container.insert(start + i, heading)

    return warning_result(
        str(soup),
        [f"Auto-generated {missing} H2 heading(s) (required {min_count}, found {current})"],
        [f"auto-generated {missing} H2 heading(s)"],
    )


heading_policy = Policy(
    name="requireH2",
    description="Require a minimum number of H2 headings",
    priority=10,
    apply=apply_require_h2,
)
