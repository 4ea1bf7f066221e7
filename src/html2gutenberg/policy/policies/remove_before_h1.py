"""Removes all content that appears before the first H1 heading, and the H1."""

from bs4 import BeautifulSoup, Doctype, Tag

from ..base import Policy, PolicyOptions, PolicyResult, merge_options, success_result, warning_result

DEFAULT_OPTIONS: PolicyOptions = {
    "autoRemove": True,
}

# Climbing stops at these ancestors so <head> and the document shell survive
STOP_AT = {"body", "html"}


def apply_remove_before_h1(html: str, soup: BeautifulSoup, options: PolicyOptions) -> PolicyResult:
    opts = merge_options(DEFAULT_OPTIONS, options)

    first_h1 = soup.find("h1")
    if first_h1 is None or not opts.get("autoRemove"):
        return success_result(html)

    removed_tags: list[str] = []

    def remove_preceding(node: Tag) -> None:
        for sibling in list(node.previous_siblings):
            if isinstance(sibling, Tag):
                removed_tags.append(sibling.name)
                sibling.decompose()
            elif not isinstance(sibling, Doctype):
                sibling.extract()

    remove_preceding(first_h1)
    parent = first_h1.parent
    while isinstance(parent, Tag) and not isinstance(parent, BeautifulSoup) and parent.name not in STOP_AT:
        remove_preceding(parent)
        parent = parent.parent

    first_h1.decompose()
    removed_tags.append("h1")

    count = len(removed_tags)
    unique = ", ".join(dict.fromkeys(removed_tags))
    return warning_result(
        str(soup),
        [f"Removed {count} element(s) before and including the first H1 (tags: {unique})"],
        [f"removed {count} element(s) before and including first H1"],
    )


remove_before_h1_policy = Policy(
    name="removeBeforeH1",
    description="Remove everything before the first H1, and the H1 itself",
    priority=3,
    apply=apply_remove_before_h1,
)
