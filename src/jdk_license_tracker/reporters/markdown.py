"""Markdown reporter for verdict reports.

This module provides a reporter that renders analysis results as a
Markdown document using Jinja2 templates.
"""

from datetime import date
from importlib.resources import files
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, Template

from jdk_license_tracker.analyzer import AnalysisResult, distinct_verdicts, summarize
from jdk_license_tracker.reporters.base import BaseReporter


class MarkdownReporter(BaseReporter):
    """Reporter that generates Markdown verdict reports.

    Input-derived text is HTML-escaped because reports are commonly rendered
    to HTML by code hosts and wikis.

    Attributes:
        template: The Jinja2 template to use for rendering.
    """

    def __init__(self, template_path: Optional[Path] = None) -> None:
        """Initialize the Markdown reporter.

        Args:
            template_path: Optional path to a custom Jinja2 template.
                If not provided, uses the default bundled template.
        """
        if template_path:
            env = Environment(
                loader=FileSystemLoader(template_path.parent),
                autoescape=True,
            )
            self.template = env.get_template(template_path.name)
        else:
            self.template = self._load_default_template()

    def _load_default_template(self) -> Template:
        template_content = (
            files("jdk_license_tracker.templates")
            .joinpath("verdicts.md.j2")
            .read_text(encoding="utf-8")
        )
        env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
        return env.from_string(template_content)

    def render(self, results: list[AnalysisResult], as_of: date) -> str:
        """Render analysis results to Markdown.

        Args:
            results: Analysis results in input order.
            as_of: Evaluation date the results were computed for.

        Returns:
            Rendered Markdown document as a string.
        """
        return self.template.render(
            results=results,
            verdicts=distinct_verdicts(results),
            failures=[r for r in results if r.failure is not None],
            summary=summarize(results),
            as_of=as_of,
        )

    @property
    def format_name(self) -> str:
        return "markdown"

    @property
    def default_extension(self) -> str:
        return ".md"
