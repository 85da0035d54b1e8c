"""
Reporting and output generation module.

Renders organization summaries as JSON or as a markdown digest.
"""

from orgscan.reporting.formatter import (
    SummaryFormatter,
    JSONFormatter,
    MarkdownFormatter,
    format_summary,
    get_formatter,
)

__all__ = [
    "SummaryFormatter",
    "JSONFormatter",
    "MarkdownFormatter",
    "format_summary",
    "get_formatter",
]
