"""Read-only admin reporting: model report, preview ranking and coverage."""

from .coverage import MatchingCoverage, internship_coverage, student_coverage
from .preview import (
    PreviewFilters,
    build_contribution_rows,
    evaluate_single_preview_match,
    filter_internships,
    rank_internships_for_preview,
)
from .report import (
    DIFFERENTIATION_MESSAGING,
    DIFFERENTIATION_RISKS_AND_MITIGATIONS,
    MAJOR_INTERNSHIP_MATRIX,
    MATCHING_CANONICAL_ENUMS,
    MATCHING_DATA_SOURCES,
    NORMALIZATION_FORMULA,
    QUALITY_OVER_QUANTITY_BULLETS,
    MatchingReport,
    build_matching_report,
    build_report_summary,
    build_sample_breakdown,
    build_signal_table,
)

__all__ = [
    "MatchingCoverage",
    "student_coverage",
    "internship_coverage",
    "PreviewFilters",
    "filter_internships",
    "rank_internships_for_preview",
    "evaluate_single_preview_match",
    "build_contribution_rows",
    "MatchingReport",
    "build_matching_report",
    "build_report_summary",
    "build_sample_breakdown",
    "build_signal_table",
    "NORMALIZATION_FORMULA",
    "MATCHING_CANONICAL_ENUMS",
    "MATCHING_DATA_SOURCES",
    "QUALITY_OVER_QUANTITY_BULLETS",
    "DIFFERENTIATION_MESSAGING",
    "DIFFERENTIATION_RISKS_AND_MITIGATIONS",
    "MAJOR_INTERNSHIP_MATRIX",
]
