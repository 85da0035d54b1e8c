"""
Summary formatters for different output formats.

Provides a JSON formatter for machine consumption and a markdown
formatter producing a short organization digest.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from orgscan.core.config import ReportConfig
from orgscan.core.exceptions import ReportError
from orgscan.summary.summary import OrganizationSummary

logger = logging.getLogger(__name__)


class SummaryFormatter(ABC):
    """Abstract base class for summary formatters."""

    extension: str = ".txt"

    @abstractmethod
    def format(self, summary: OrganizationSummary) -> str:
        """Format a summary to string."""
        pass

    def save(self, summary: OrganizationSummary, path: Path) -> None:
        """Save formatted summary to file."""
        path = Path(path)
        content = self.format(summary)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ReportError(
                f"Could not write report: {e}", details={"path": str(path)}
            ) from e

        logger.info(f"Report saved to {path}")


class JSONFormatter(SummaryFormatter):
    """Formats the full summary as indented JSON."""

    extension = ".json"

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, summary: OrganizationSummary) -> str:
        return summary.to_json(indent=self.indent)


class MarkdownFormatter(SummaryFormatter):
    """
    Formats a summary as a markdown digest.

    Lists the overview counts, the most used languages and topics, and
    the larger topic clusters.
    """

    extension = ".md"

    def __init__(self, config: ReportConfig = None):
        self.config = config or ReportConfig()

    def format(self, summary: OrganizationSummary) -> str:
        lines: List[str] = []
        lines.extend(self._format_header(summary))
        lines.extend(self._format_overview(summary))
        lines.extend(self._format_languages(summary))
        lines.extend(self._format_topics(summary))
        lines.extend(self._format_clusters(summary))
        return "\n".join(lines)

    def _format_header(self, summary: OrganizationSummary) -> List[str]:
        lines = [f"# {summary.organization} Repository Analysis"]
        if summary.scan_date:
            lines.append(f"*Generated on {summary.scan_date[:10]}*")
        lines.append("")
        return lines

    def _format_overview(self, summary: OrganizationSummary) -> List[str]:
        return [
            "## Overview",
            f"- **Total Repositories:** {summary.total_repositories}",
            f"- **Public:** {summary.public_repositories}",
            f"- **Private:** {summary.private_repositories}",
            f"- **Total Stars:** {summary.total_stars:,}",
            f"- **Total Forks:** {summary.total_forks:,}",
            "",
        ]

    def _format_languages(self, summary: OrganizationSummary) -> List[str]:
        lines = ["## Top Languages"]
        top = list(summary.languages.items())[:self.config.top_languages]
        for language, size in top:
            lines.append(f"- **{language}:** {size / 1024 / 1024:.1f} MB")
        lines.append("")
        return lines

    def _format_topics(self, summary: OrganizationSummary) -> List[str]:
        lines = ["## Popular Topics"]
        top = list(summary.topics.items())[:self.config.top_topics]
        for topic, count in top:
            lines.append(f"- **{topic}:** {count} repositories")
        lines.append("")
        return lines

    def _format_clusters(self, summary: OrganizationSummary) -> List[str]:
        lines = ["## Repository Clusters"]
        for topic, names in summary.relationships.topic_clusters.items():
            if len(names) < self.config.min_reported_cluster_size:
                continue
            lines.append(f"### {topic}")
            lines.extend(f"- {name}" for name in names)
            lines.append("")
        return lines


FORMATTERS = {
    "json": JSONFormatter,
    "markdown": MarkdownFormatter,
}


def get_formatter(format_type: str, config: ReportConfig = None) -> SummaryFormatter:
    """
    Get a formatter by name.

    Raises:
        ReportError: If the format is unknown.
    """
    if format_type not in FORMATTERS:
        raise ReportError(
            f"Unknown report format: {format_type}",
            details={"supported": sorted(FORMATTERS)},
        )
    if format_type == "markdown":
        return MarkdownFormatter(config)
    return FORMATTERS[format_type]()


def format_summary(
    summary: OrganizationSummary,
    format_type: str = "json",
    output_path: Optional[Path] = None,
    config: ReportConfig = None,
) -> str:
    """
    Format and optionally save a summary.

    Args:
        summary: Summary to format.
        format_type: Output format ("json", "markdown").
        output_path: Optional path to save the report.
        config: Optional report configuration.

    Returns:
        Formatted summary string.
    """
    formatter = get_formatter(format_type, config)
    formatted = formatter.format(summary)

    if output_path:
        formatter.save(summary, output_path)

    return formatted
