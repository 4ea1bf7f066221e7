"""Ensures the document has a minimum number of images."""

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
    "autoInsertPlaceholder": False,
    "placeholderUrl": "https://via.placeholder.com/800x400?text=Image+Placeholder",
    "placeholderAlt": "Article illustration",
    "placeholderCaption": "Please add an image",
}


def _placeholder(soup: BeautifulSoup, opts: PolicyOptions):
    figure = soup.new_tag("figure")
    figure.append(soup.new_tag("img", attrs={"src": opts["placeholderUrl"], "alt": opts["placeholderAlt"]}))
    caption = soup.new_tag("figcaption")
    caption.string = str(opts["placeholderCaption"])
    figure.append(caption)
    return figure


def apply_min_image_count(html: str, soup: BeautifulSoup, options: PolicyOptions) -> PolicyResult:
    opts = merge_options(DEFAULT_OPTIONS, options)
    min_count = int(opts.get("minCount") or 0)

    if min_count <= 0:
        return success_result(html)

    current = len(soup.find_all("img"))
    if current >= min_count:
        return success_result(html)

    missing = min_count - current

    if not opts.get("autoInsertPlaceholder"):
        return failed_result(
            html,
            [f"Document must contain at least {min_count} image(s) (found {current})"],
        )

    anchor = soup.find("h2") or soup.find("p")
    container = soup.body or soup
    start = content_start(container)
    for i in range(missing):
        figure = _placeholder(soup, opts)
        if anchor is not None:
            anchor.insert_after(figure)
        else:
            container.insert(start + i, figure)

    return warning_result(
        str(soup),
        [
            f"Inserted {missing} placeholder image(s) (required {min_count}, found {current}); "
            "replace them with real images"
        ],
        [f"auto-inserted {missing} placeholder image(s)"],
    )


min_image_policy = Policy(
    name="minImageCount",
    description="Require a minimum number of images",
    priority=20,
    apply=apply_min_image_count,
)
