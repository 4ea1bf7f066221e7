"""Tests for the policy registry and pipeline."""

import pytest
from html2gutenberg.errors import DocumentParseError
from html2gutenberg.models.config import ConversionMode, PolicyConfig
from html2gutenberg.policy.base import Policy, PolicyResult, failed_result, success_result, warning_result
from html2gutenberg.policy.pipeline import PolicyPipeline
from html2gutenberg.policy.registry import PolicyRegistry, default_registry


def appender(name, priority=100):
    """Policy that appends a marker paragraph and reports an action."""

    def apply(html, soup, options):
        marker = soup.new_tag("p")
        marker.string = options.get("text", name)
        (soup.body or soup).append(marker)
        return warning_result(str(soup), [], [f"appended {name}"])

    return Policy(name=name, description=f"Append {name}", apply=apply, priority=priority)


def failing(name, priority=100):
    return Policy(
        name=name,
        description="Always fails",
        apply=lambda html, soup, options: failed_result(html, [f"{name} failed"]),
        priority=priority,
    )


def silent(name, priority=100):
    return Policy(
        name=name,
        description="Does nothing",
        apply=lambda html, soup, options: success_result(html),
        priority=priority,
    )


def raising(name, priority=100):
    def apply(html, soup, options):
        raise ValueError("boom")

    return Policy(name=name, description="Raises", apply=apply, priority=priority)


class TestPolicyRegistry:
    """Tests for PolicyRegistry."""

    def test_register_and_lookup(self):
        """Test registered policies are found by name in order."""
        registry = PolicyRegistry().register(silent("a")).register(silent("b"))
        assert registry.names() == ["a", "b"]
        assert "a" in registry
        assert registry.get("b").name == "b"
        assert registry.get("missing") is None
        assert len(registry) == 2

    def test_duplicate_replaces_in_place(self):
        """Test re-registering keeps the original position."""
        replacement = failing("a")
        registry = PolicyRegistry([silent("a"), silent("b")]).register(replacement)
        assert registry.names() == ["a", "b"]
        assert registry.get("a") is replacement

    def test_default_registry(self):
        """Test built-ins are registered in their fixed order."""
        assert default_registry().names() == [
            "removeInternalNotes",
            "forbiddenTags",
            "removeBeforeH1",
            "requireH2",
            "minImageCount",
            "addDisclaimer",
        ]

    def test_default_registry_is_fresh(self):
        """Test each call returns an independent registry."""
        first = default_registry()
        first.register(silent("extra"))
        assert "extra" not in default_registry()


class TestPipelineBuild:
    """Tests for selecting and ordering policies."""

    def test_priority_order(self):
        """Test lower priority runs first."""
        registry = PolicyRegistry([silent("late", 50), silent("early", 5), silent("mid", 10)])
        pipeline = PolicyPipeline(registry, {"late": True, "early": True, "mid": True})
        assert [policy.name for policy, _ in pipeline.build()] == ["early", "mid", "late"]

    def test_ties_keep_registration_order(self):
        """Test equal priorities keep registration order."""
        registry = PolicyRegistry([silent("b", 1), silent("a", 1), silent("c", 1)])
        pipeline = PolicyPipeline(registry, {"a": True, "b": True, "c": True})
        assert [policy.name for policy, _ in pipeline.build()] == ["b", "a", "c"]

    def test_disabled_and_unconfigured_skipped(self):
        """Test only enabled, configured policies are selected."""
        registry = PolicyRegistry([silent("on"), silent("off"), silent("absent")])
        pipeline = PolicyPipeline(registry, {"on": {"enabled": True}, "off": False})
        assert [policy.name for policy, _ in pipeline.build()] == ["on"]

    def test_config_normalized(self):
        """Test booleans and dicts become PolicyConfig."""
        pipeline = PolicyPipeline(PolicyRegistry([silent("a"), silent("b")]), {"a": True, "b": {"options": {"x": 1}}})
        assert pipeline.policies_config == {
            "a": PolicyConfig(enabled=True, options={}),
            "b": PolicyConfig(enabled=True, options={"x": 1}),
        }

    def test_unknown_policy_logged(self, caplog):
        """Test configuration for unknown names is ignored with a warning."""
        pipeline = PolicyPipeline(PolicyRegistry([silent("a")]), {"a": True, "ghost": True})
        assert [policy.name for policy, _ in pipeline.build()] == ["a"]
        assert "ghost" in caplog.text


class TestPipelineRun:
    """Tests for running the pipeline."""

    def test_policies_see_previous_output(self):
        """Test each policy receives the HTML produced before it."""
        registry = PolicyRegistry([appender("one", 1), appender("two", 2)])
        result = PolicyPipeline(registry, {"one": True, "two": True}).run("<p>start</p>")
        assert result.html == "<p>start</p><p>one</p><p>two</p>"
        assert result.report.actions == ["appended one", "appended two"]
        assert result.report.policies_triggered == ["one", "two"]

    def test_options_passed(self):
        """Test each policy receives its own options."""
        registry = PolicyRegistry([appender("one")])
        result = PolicyPipeline(registry, {"one": {"options": {"text": "custom"}}}).run("")
        assert result.html == "<p>custom</p>"

    def test_options_isolated(self):
        """Test a policy mutating its options does not change the config."""

        def apply(html, soup, options):
            options["seen"] = True
            return success_result(html)

        registry = PolicyRegistry([Policy(name="m", description="", apply=apply)])
        pipeline = PolicyPipeline(registry, {"m": PolicyConfig(options={"k": 1})})
        pipeline.run("<p></p>")
        assert pipeline.policies_config["m"].options == {"k": 1}

    def test_strict_short_circuits(self):
        """Test strict mode stops after the first failure."""
        registry = PolicyRegistry([appender("first", 1), failing("bad", 2), appender("never", 3)])
        pipeline = PolicyPipeline(registry, {"first": True, "bad": True, "never": True}, ConversionMode.STRICT)
        result = pipeline.run("<p>x</p>")
        assert not result.report.success
        assert result.report.errors == ["bad failed"]
        assert result.report.failed_policies == ["bad"]
        assert result.report.policies_triggered == ["first", "bad"]
        assert "never" not in result.html

    def test_relaxed_runs_everything(self):
        """Test relaxed mode runs all policies and stays successful."""
        registry = PolicyRegistry([failing("bad", 1), appender("after", 2)])
        result = PolicyPipeline(registry, {"bad": True, "after": True}, "relaxed").run("<p>x</p>")
        assert result.report.success
        assert result.report.failed_policies == ["bad"]
        assert result.report.errors == ["bad failed"]
        assert "<p>after</p>" in result.html

    def test_strict_success_without_failures(self):
        """Test strict mode succeeds when every policy passes."""
        registry = PolicyRegistry([appender("a")])
        result = PolicyPipeline(registry, {"a": True}, "strict").run("<p>x</p>")
        assert result.report.success

    def test_silent_policy_not_triggered(self):
        """Test policies with nothing to report are not listed."""
        registry = PolicyRegistry([silent("quiet"), appender("loud")])
        result = PolicyPipeline(registry, {"quiet": True, "loud": True}).run("<p>x</p>")
        assert result.report.policies_triggered == ["loud"]

    def test_exception_becomes_failure(self):
        """Test a raising policy is recorded as failed."""
        registry = PolicyRegistry([raising("broken", 1), appender("after", 2)])
        result = PolicyPipeline(registry, {"broken": True, "after": True}).run("<p>x</p>")
        assert result.report.errors == ['Policy "broken" raised ValueError: boom']
        assert result.report.failed_policies == ["broken"]
        assert result.report.success
        assert "<p>after</p>" in result.html

    def test_unparseable_input_is_fatal(self):
        """Test non-text input raises with the partial report attached."""
        pipeline = PolicyPipeline(PolicyRegistry([appender("a")]), {"a": True}, "relaxed")
        with pytest.raises(DocumentParseError) as exc_info:
            pipeline.run(None, input_file="bad.html")
        report = exc_info.value.report
        assert report is not None
        assert not report.success
        assert report.input_file == "bad.html"
        assert report.errors

    def test_policy_returning_non_document_is_fatal(self):
        """Test a policy returning a non-string document aborts the run."""
        bad = Policy(name="bad", description="", apply=lambda html, soup, options: PolicyResult(html=None))
        registry = PolicyRegistry([appender("first", 1), bad])
        pipeline = PolicyPipeline(registry, {"first": True, "bad": True}, "relaxed")
        with pytest.raises(DocumentParseError) as exc_info:
            pipeline.run("<p>x</p>")
        assert exc_info.value.report.actions == ["appended first"]
        assert not exc_info.value.report.success

    def test_deterministic(self):
        """Test identical input gives identical output and report content."""
        pipeline = PolicyPipeline(
            default_registry(),
            {"forbiddenTags": True, "requireH2": {"options": {"autoGenerate": True}}},
        )
        html = "<p>x</p><script>1</script>"
        first = pipeline.run(html)
        second = pipeline.run(html)
        assert first.html == second.html
        assert first.report.warnings == second.report.warnings
        assert first.report.actions == second.report.actions

    def test_report_metadata(self):
        """Test report identifiers and timing are filled in."""
        registry = PolicyRegistry([silent("a")])
        result = PolicyPipeline(registry, {"a": True}).run("<p>x</p>", output_file="out.html")
        assert result.report.input_file == "(string input)"
        assert result.report.output_file == "out.html"
        assert result.report.execution_time_ms >= 0
        assert result.report.timestamp

    def test_builtin_priorities_with_defaults(self):
        """Test built-ins run in priority order, not registration order."""
        pipeline = PolicyPipeline(
            default_registry(),
            {"removeInternalNotes": True, "forbiddenTags": True, "removeBeforeH1": True},
        )
        assert [policy.name for policy, _ in pipeline.build()] == [
            "removeBeforeH1",
            "forbiddenTags",
            "removeInternalNotes",
        ]
