"""Report and result types produced by a conversion run."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

DEFAULT_INPUT_NAME = "(string input)"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ConversionReport:
    """
    Aggregate outcome of one policy pipeline run.

    Created when the pipeline starts and finalized when it ends. Warnings,
    errors and actions are concatenated in policy execution order.

    Attributes:
        input_file: Identifier of the input document
        output_file: Identifier of the output, if the caller writes one
        timestamp: ISO-8601 UTC start time
        policies_triggered: Policies that produced a warning, error or action
        warnings: All warnings, in order
        errors: All errors, in order
        actions: All mutations performed, in order
        failed_policies: Policies that reported passed=False
        success: Overall outcome for the configured mode
        execution_time_ms: Wall-clock duration of the run
    """

    input_file: str = DEFAULT_INPUT_NAME
    output_file: Optional[str] = None
    timestamp: str = field(default_factory=_utc_timestamp)
    policies_triggered: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)
    failed_policies: list[str] = field(default_factory=list)
    success: bool = True
    execution_time_ms: float = 0.0

    @property
    def has_issues(self) -> bool:
        """Check whether any warning or error was recorded."""
        return bool(self.warnings or self.errors)

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for serialization."""
        return {
            "inputFile": self.input_file,
            "outputFile": self.output_file,
            "timestamp": self.timestamp,
            "policiesTriggered": list(self.policies_triggered),
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "actions": list(self.actions),
            "failedPolicies": list(self.failed_policies),
            "success": self.success,
            "executionTimeMs": round(self.execution_time_ms, 2),
        }


@dataclass
class ConversionResult:
    """Converted HTML together with the report describing how it was produced."""

    html: str
    report: ConversionReport

    def to_dict(self, include_report: bool = True) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        data: dict[str, Any] = {"html": self.html}
        if include_report:
            data["report"] = self.report.to_dict()
        return data
