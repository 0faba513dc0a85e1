from .bundle import ReportBundle, ReportSection
from .report import SECTION_ORDER, data_quality_banner, render_report, render_sections

__all__ = [
    "ReportBundle",
    "ReportSection",
    "SECTION_ORDER",
    "data_quality_banner",
    "render_report",
    "render_sections",
]
