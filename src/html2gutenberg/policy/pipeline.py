"""Ordered, fail-aware execution of policies over one HTML document."""

import copy
import logging
import time
from typing import Mapping, Optional, Union

from ..errors import DocumentParseError
from ..models.config import ConversionMode, PolicyConfig, PolicySetting, normalize_policy_config
from ..models.report import DEFAULT_INPUT_NAME, ConversionReport, ConversionResult
from .base import Policy, PolicyResult, failed_result, parse_document
from .registry import PolicyRegistry, default_registry

logger = logging.getLogger(__name__)


class PolicyPipeline:
    """
    Runs enabled policies in priority order and aggregates one report.

    Each policy receives the HTML produced by the previous one, a soup
    parsed for it alone, and its own options. In strict mode the pipeline
    stops after the first failed policy; in relaxed mode every enabled
    policy runs and failures are only recorded.

    Only an unparseable document is fatal: ``run`` raises
    DocumentParseError with the partial report attached as ``err.report``.
    Any other exception from a policy is recorded as that policy failing.

    Example:
        pipeline = PolicyPipeline(
            default_registry(),
            {"requireH2": {"options": {"minCount": 1}}, "forbiddenTags": True},
            mode=ConversionMode.STRICT,
        )
        result = pipeline.run(html, input_file="post.html")
        if not result.report.success:
            logger.error(f"Failed: {result.report.errors}")
    """

    def __init__(
        self,
        registry: Optional[PolicyRegistry] = None,
        policies_config: Optional[Mapping[str, Union[PolicySetting, dict, None]]] = None,
        mode: Union[ConversionMode, str] = ConversionMode.RELAXED,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.mode = ConversionMode(mode)
        self.policies_config: dict[str, PolicyConfig] = {
            name: normalize_policy_config(value) for name, value in (policies_config or {}).items()
        }

        for name in self.policies_config:
            if name not in self.registry:
                logger.warning(f"Ignoring configuration for unknown policy: {name}")

    def build(self) -> list[tuple[Policy, PolicyConfig]]:
        """
        Select enabled policies and order them by priority.

        A registered policy with no configuration entry is disabled. The
        sort is stable, so equal priorities keep registration order.
        """
        selected = []
        for policy in self.registry:
            config = self.policies_config.get(policy.name)
            if config is not None and config.enabled:
                selected.append((policy, config))
        selected.sort(key=lambda item: item[0].priority)
        return selected

    def _apply(self, policy: Policy, config: PolicyConfig, html: str) -> PolicyResult:
        soup = parse_document(html)
        try:
            result = policy.apply(html, soup, copy.deepcopy(config.options))
        except DocumentParseError:
            raise
        except Exception as e:
            logger.error(f"Policy {policy.name} raised an exception", exc_info=True)
            return failed_result(html, [f'Policy "{policy.name}" raised {type(e).__name__}: {e}'])

        if not isinstance(result, PolicyResult) or not isinstance(result.html, str):
            raise DocumentParseError(f'Policy "{policy.name}" did not return a document')
        return result

    def run(
        self,
        html: str,
        input_file: str = DEFAULT_INPUT_NAME,
        output_file: Optional[str] = None,
    ) -> ConversionResult:
        """
        Run the pipeline over a document.

        Args:
            html: Document to process
            input_file: Identifier recorded in the report
            output_file: Output identifier recorded in the report

        Returns:
            ConversionResult with the final HTML and the report

        Raises:
            DocumentParseError: If the document (or a policy's output) cannot be parsed
        """
        start = time.perf_counter()
        report = ConversionReport(input_file=input_file, output_file=output_file)

        def finish() -> None:
            report.execution_time_ms = (time.perf_counter() - start) * 1000

        current = html
        try:
            parse_document(current)
            policies = self.build()
            logger.info(f"Running {len(policies)} policies in {self.mode.value} mode on {input_file}")

            for policy, config in policies:
                logger.debug(f"Applying policy {policy.name} (priority {policy.priority})")
                result = self._apply(policy, config, current)

                current = result.html
                report.warnings.extend(result.warnings)
                report.errors.extend(result.errors)
                report.actions.extend(result.actions)
                if result.triggered:
                    report.policies_triggered.append(policy.name)

                if not result.passed:
                    report.failed_policies.append(policy.name)
                    logger.info(f"Policy {policy.name} failed")
                    if self.mode == ConversionMode.STRICT:
                        logger.info("Strict mode: stopping after first failure")
                        break
        except DocumentParseError as err:
            report.errors.append(str(err))
            report.success = False
            finish()
            err.report = report
            logger.error(f"Fatal error while processing {input_file}: {err}")
            raise

        if self.mode == ConversionMode.STRICT:
            report.success = not report.failed_policies
        else:
            report.success = True
        finish()

        logger.info(
            f"Pipeline finished: {len(report.policies_triggered)} triggered, "
            f"{len(report.failed_policies)} failed, success={report.success}"
        )
        return ConversionResult(html=current, report=report)
