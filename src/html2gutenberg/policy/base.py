"""Base types for the policy pipeline."""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from bs4 import BeautifulSoup, Doctype, NavigableString, Tag
from bs4.builder import ParserRejectedMarkup

from ..errors import DocumentParseError

DEFAULT_PRIORITY = 100

PolicyOptions = dict[str, Any]


@dataclass
class PolicyResult:
    """
    Outcome of applying one policy.

    Attributes:
        html: Document after the policy ran (unchanged if it only inspected)
        warnings: Non-blocking messages
        errors: Messages explaining a failure
        passed: False if the policy failed; halts the pipeline in strict mode
        actions: Human-readable descriptions of mutations performed
    """

    html: str
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    passed: bool = True
    actions: list[str] = field(default_factory=list)

    @property
    def triggered(self) -> bool:
        """Check whether the policy produced any warning, error or action."""
        return bool(self.warnings or self.errors or self.actions)


def success_result(html: str, actions: Optional[list[str]] = None) -> PolicyResult:
    """Result for a policy that passed with nothing to report."""
    return PolicyResult(html=html, actions=list(actions or []))


def failed_result(html: str, errors: list[str], warnings: Optional[list[str]] = None) -> PolicyResult:
    """Result for a policy that failed."""
    return PolicyResult(html=html, warnings=list(warnings or []), errors=list(errors), passed=False)


def warning_result(html: str, warnings: list[str], actions: Optional[list[str]] = None) -> PolicyResult:
    """Result for a policy that passed after fixing or flagging something."""
    return PolicyResult(html=html, warnings=list(warnings), actions=list(actions or []))


ApplyFunction = Callable[[str, BeautifulSoup, PolicyOptions], PolicyResult]


@dataclass(frozen=True)
class Policy:
    """
    A named, prioritized rule that inspects and/or rewrites HTML.

    ``apply(html, soup, options)`` receives the current document text, a
    soup parsed from that text for this call only, and the policy's own
    options. It must return a PolicyResult and never depend on state from
    other policies.

    Example:
        def _apply(html, soup, options):
            if soup.find("marquee"):
                return failed_result(html, ["marquee is not allowed"])
            return success_result(html)

        no_marquee = Policy(name="noMarquee", description="Reject marquee", apply=_apply)
    """

    name: str
    description: str
    apply: ApplyFunction
    priority: int = DEFAULT_PRIORITY


def merge_options(defaults: Mapping[str, Any], options: Optional[Mapping[str, Any]]) -> PolicyOptions:
    """Overlay user options on a deep copy of a policy's defaults."""
    merged = copy.deepcopy(dict(defaults))
    if options:
        merged.update(options)
    return merged


def parse_document(html: Any) -> BeautifulSoup:
    """
    Parse HTML text into a fresh document.

    Raises:
        DocumentParseError: If the input is not text or the parser rejects it
    """
    if not isinstance(html, str):
        raise DocumentParseError(f"Cannot parse document of type {type(html).__name__}; expected text")
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as err:
        raise DocumentParseError(f"Cannot parse document: {err}") from err


def content_start(container: Tag) -> int:
    """Index of the first child of ``container`` after any leading doctype."""
    start = 0
    for index, child in enumerate(container.contents):
        if isinstance(child, Doctype):
            start = index + 1
        elif not isinstance(child, NavigableString) or child.strip():
            break
    return start
