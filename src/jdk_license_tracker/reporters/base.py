"""Base interface for output reporters.

Reporters generate formatted output (Markdown, JSON) from analysis results.
"""

from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path

from jdk_license_tracker.analyzer import AnalysisResult


class BaseReporter(ABC):
    """Abstract base class for output reporters.

    Reporters take analysis results and generate formatted output documents.
    """

    @abstractmethod
    def render(self, results: list[AnalysisResult], as_of: date) -> str:
        """Render analysis results to formatted output.

        Args:
            results: Analysis results in input order.
            as_of: Evaluation date the results were computed for.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, results: list[AnalysisResult], as_of: date, output_path: Path) -> None:
        """Render and write output to a file.

        Args:
            results: Analysis results in input order.
            as_of: Evaluation date the results were computed for.
            output_path: Path to write the output file.
        """
        content = self.render(results, as_of)
        output_path.write_text(content, encoding="utf-8")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format name.

        Returns:
            Format name like "markdown" or "json".
        """
        ...

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Return the default file extension for this format.

        Returns:
            Extension like ".md" or ".json".
        """
        ...
