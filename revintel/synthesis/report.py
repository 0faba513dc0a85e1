"""Section ordering and final document assembly."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from revintel.models.assessment import ParsedAssessmentFields, ValidationReport

from . import sections
from .bundle import ReportBundle, ReportSection

logger = logging.getLogger(__name__)

SectionRenderer = Callable[[ReportBundle], str]

SECTION_ORDER: tuple[tuple[str, str, SectionRenderer], ...] = (
    ("executive_summary", "Executive Summary", sections.executive_summary),
    ("current_state", "Current State Analysis", sections.current_state),
    ("benchmarks", "Industry Benchmarks", sections.benchmarks),
    ("solutions", "In-Scope Solutions", sections.solutions),
    ("future_state", "Future State Vision", sections.future_state),
    ("roi", "Return on Investment", sections.roi),
    ("market_context", "Market Context", sections.market_context),
    ("recommendations", "Strategic Recommendations", sections.recommendations),
)

SECTION_SEPARATOR = "\n\n---\n\n"


def data_quality_banner(
    validation: ValidationReport, parsed: ParsedAssessmentFields
) -> Optional[str]:
    """Warning prepended to the document when the data needs a human look."""
    if not validation.requires_manual_review:
        return None

    defaulted = parsed.defaulted_fields
    text = f"This report used estimated defaults for {len(defaulted)} fields"
    if defaulted:
        text += f" ({', '.join(defaulted)})"
    flagged = len(validation.suspicious_values)
    if flagged:
        text += f" and {flagged} values were flagged as suspicious"
    text += ". Review the inputs before relying on these figures."
    return f"[DATA_QUALITY_WARNING] {text} [/DATA_QUALITY_WARNING]"


def render_sections(bundle: ReportBundle) -> list[ReportSection]:
    return [
        ReportSection(name=name, title=title, content=render(bundle))
        for name, title, render in SECTION_ORDER
    ]


def assemble_document(
    rendered: list[ReportSection],
    banner: Optional[str] = None,
) -> str:
    parts = [s.content for s in rendered]
    body = SECTION_SEPARATOR.join(parts)
    return f"{banner}\n\n{body}" if banner else body


def render_report(bundle: ReportBundle) -> tuple[list[ReportSection], str]:
    """Render every section in order and join them into one document."""
    rendered = render_sections(bundle)
    banner = data_quality_banner(bundle.data.validation, bundle.data.parsed)
    if banner:
        logger.warning(f"Report for {bundle.data.company or 'unknown company'} requires manual review")
    return rendered, assemble_document(rendered, banner)
