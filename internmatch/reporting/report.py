"""Admin transparency report for the matching model.

Everything here is derived from the scoring model and static copy, never
from live rows, so two reports for the same model differ only in their
generated_at timestamp.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from internmatch.matching.engine import MatchingEngine
from internmatch.matching.service import MatchingService
from internmatch.matching.signals import DEFAULT_SCORING_MODEL, ScoringModel, SignalKey
from internmatch.normalization.models import (
    InternshipExperienceLevel,
    RemoteScope,
    StudentExperienceLevel,
    TermSeason,
    TransportMode,
    WorkMode,
    YearInSchool,
)
from internmatch.utils import format_timestamp, utc_now

from .fixtures import SAMPLE_CATALOG, SAMPLE_INTERNSHIPS, SAMPLE_STUDENT_NAMES, SAMPLE_STUDENTS
from .preview import build_contribution_rows

NORMALIZATION_FORMULA = "normalized_score = total_score / max_score"


def _members(enum_cls) -> List[str]:
    return [member.value for member in enum_cls if member.name != "UNKNOWN"]


MATCHING_CANONICAL_ENUMS: Dict[str, List[str]] = {
    "experience_levels_internship": _members(InternshipExperienceLevel),
    "experience_levels_student": _members(StudentExperienceLevel),
    "work_modes": _members(WorkMode),
    "term_seasons": _members(TermSeason),
    "years_in_school": [value for value in _members(YearInSchool) if value != "any"],
    "transport_modes": _members(TransportMode),
    "remote_scopes": _members(RemoteScope),
}

MATCHING_DATA_SOURCES: List[Dict[str, str]] = [
    {
        "field": "Student majors",
        "signal": SignalKey.MAJOR_ALIGNMENT.value,
        "source_table": "student_profiles + canonical_majors",
        "source_column": "major_id, secondary_major_id, majors",
        "notes": "Canonical major ids first; free-text majors earn partial credit.",
    },
    {
        "field": "Student year in school",
        "signal": SignalKey.YEAR_IN_SCHOOL.value,
        "source_table": "student_profiles",
        "source_column": "year",
        "notes": "Compared against the listing's target years.",
    },
    {
        "field": "Student experience",
        "signal": SignalKey.EXPERIENCE_ALIGNMENT.value,
        "source_table": "student_profiles",
        "source_column": "experience_level",
        "notes": "Mapped to ordinal levels none/projects/internship.",
    },
    {
        "field": "Student availability",
        "signal": SignalKey.TERM_AVAILABILITY.value,
        "source_table": "student_profiles",
        "source_column": "availability_start_month, availability_hours_per_week",
        "notes": "Start month must fall in the term window; hours must cover the listing minimum.",
    },
    {
        "field": "Student location and work mode preferences",
        "signal": SignalKey.LOCATION_MODE_FIT.value,
        "source_table": "student_profiles",
        "source_column": "preferred_city, preferred_state, preferred_work_modes, remote_only, max_commute_minutes",
        "notes": "Commute fit uses coordinates when both sides have them.",
    },
    {
        "field": "Student canonical skills",
        "signal": f"{SignalKey.SKILLS_REQUIRED.value}, {SignalKey.SKILLS_PREFERRED.value}",
        "source_table": "student_skill_items + skills",
        "source_column": "skill_id",
        "notes": "Canonical skill ids are the primary matching path; unmatched labels stay as custom tokens.",
    },
    {
        "field": "Student coursework",
        "signal": SignalKey.COURSEWORK_ALIGNMENT.value,
        "source_table": "student_coursework_category_links + student_coursework_items",
        "source_column": "category_id, coursework_item_id",
        "notes": "Coursework items roll up into their category before overlap is measured.",
    },
    {
        "field": "Internship majors and category",
        "signal": SignalKey.MAJOR_ALIGNMENT.value,
        "source_table": "internships",
        "source_column": "major_ids, majors, category, role_category",
        "notes": "An empty target major set places no constraint.",
    },
    {
        "field": "Internship required and preferred skills",
        "signal": f"{SignalKey.SKILLS_REQUIRED.value}, {SignalKey.SKILLS_PREFERRED.value}",
        "source_table": "internships + internship_*_skill_items",
        "source_column": "required_skills, preferred_skills, skill_id links",
        "notes": "Canonical ids first; 'Required skills:' lines in the description are also parsed.",
    },
    {
        "field": "Internship coursework",
        "signal": SignalKey.COURSEWORK_ALIGNMENT.value,
        "source_table": "internships + internship_coursework_* links",
        "source_column": "coursework_category_ids, coursework_item_ids, recommended_coursework",
        "notes": "Category ids, item ids (rolled up to their category) and free text all count.",
    },
    {
        "field": "Internship term, work mode, location and hours",
        "signal": f"{SignalKey.TERM_AVAILABILITY.value}, {SignalKey.LOCATION_MODE_FIT.value}",
        "source_table": "internships",
        "source_column": "term, start_month, end_month, work_mode, location, hours_per_week",
        "notes": "Term text such as 'Summer 2026' or 'May 2026 - Aug 2026' becomes a month window.",
    },
]

QUALITY_OVER_QUANTITY_BULLETS: List[str] = [
    "Canonical category-first matching: skills, coursework and majors match by normalized ids before falling back to raw text.",
    "Explainable fit: every ranking shows why it matched and where gaps exist.",
    "Frozen application snapshots: the score an employer sees is the score computed when the student applied.",
    "Constraint-aware ranking: term, availability, work mode, location, year and experience all carry weight, and listings that fail a hard constraint (work mode, location, term, hours) can be filtered out.",
    "Versioned scoring: a change to any weight or threshold ships under a new matching version.",
]

DIFFERENTIATION_MESSAGING: List[str] = [
    "Fewer but better applicants: we optimize for eligibility and fit before exposure.",
    "Transparent matching: employers can see why candidates are being prioritized.",
    "Structured student signals: major, coursework and skill categories are standardized, not free-form guesswork.",
    "Honest gaps: students see exactly which requirements they are missing.",
]

DIFFERENTIATION_RISKS_AND_MITIGATIONS: List[Dict[str, str]] = [
    {
        "risk": "If canonical tags are missing on internships or students, scoring quality drops toward text fallback behavior.",
        "mitigation": "Match-coverage indicators highlight missing majors, skills, coursework, term, hours, location, year and experience.",
    },
    {
        "risk": "Sparse student profiles score low across the board and hide good opportunities.",
        "mitigation": "Gaps prompt students to add the missing profile fields the listing asks for.",
    },
]

MAJOR_INTERNSHIP_MATRIX: List[Dict[str, Any]] = [
    {
        "major": "Computer Science",
        "suggested_coursework_categories": ["Software Engineering Fundamentals", "SQL / Databases", "Statistics / Probability"],
        "internship_types": ["Software Engineering Intern", "Backend Engineer Intern", "Data Engineering Intern"],
    },
    {
        "major": "Information Systems",
        "suggested_coursework_categories": ["SQL / Databases", "Data Visualization (Tableau/Power BI)", "Product Management Fundamentals"],
        "internship_types": ["Business Systems Analyst Intern", "Product Operations Intern", "Business Intelligence Intern"],
    },
    {
        "major": "Finance",
        "suggested_coursework_categories": ["Corporate Finance / Valuation", "Financial Modeling (Excel)", "Statistics / Probability"],
        "internship_types": ["Financial Analyst Intern", "FP&A Intern", "Investment Analyst Intern"],
    },
    {
        "major": "Accounting",
        "suggested_coursework_categories": ["Financial Accounting", "Managerial Accounting", "Financial Modeling (Excel)"],
        "internship_types": ["Audit Intern", "Tax Intern", "Corporate Accounting Intern"],
    },
    {
        "major": "Marketing",
        "suggested_coursework_categories": ["Marketing Analytics", "Data Visualization (Tableau/Power BI)", "Statistics / Probability"],
        "internship_types": ["Growth Marketing Intern", "Digital Marketing Intern", "Market Research Intern"],
    },
    {
        "major": "Data Science / Statistics",
        "suggested_coursework_categories": ["Statistics / Probability", "Econometrics / Regression", "SQL / Databases"],
        "internship_types": ["Data Analyst Intern", "Data Science Intern", "Analytics Engineering Intern"],
    },
    {
        "major": "Business Administration",
        "suggested_coursework_categories": ["Operations / Supply Chain", "Corporate Finance / Valuation", "Product Management Fundamentals"],
        "internship_types": ["Operations Intern", "Business Analyst Intern", "Strategy Intern"],
    },
    {
        "major": "Economics",
        "suggested_coursework_categories": ["Econometrics / Regression", "Statistics / Probability", "Corporate Finance / Valuation"],
        "internship_types": ["Economic Research Intern", "Policy Analyst Intern", "Quantitative Analyst Intern"],
    },
]


def build_signal_table(model: Optional[ScoringModel] = None) -> List[Dict[str, Any]]:
    """One row per signal: key, weight, kind, description and share of max score."""
    model = model or DEFAULT_SCORING_MODEL
    max_score = model.max_score
    return [
        {
            "key": signal.key.value,
            "weight": float(signal.weight),
            "kind": signal.kind.value,
            "description": signal.description,
            "share_of_max": round(signal.weight / max_score, 4),
        }
        for signal in model.signals
    ]


def build_report_summary(model: Optional[ScoringModel] = None) -> Dict[str, Any]:
    model = model or DEFAULT_SCORING_MODEL
    return {
        "matching_version": model.version,
        "signal_keys": [signal.key.value for signal in model.signals],
        "signal_definitions": {signal.key.value: signal.description for signal in model.signals},
        "weights": model.weights,
        "max_score": model.max_score,
        "fingerprint": model.fingerprint,
        "settings": model.settings.to_dict(),
        "normalization_formula": NORMALIZATION_FORMULA,
    }


def build_sample_breakdown(engine: Optional[MatchingEngine] = None) -> Dict[str, Any]:
    """Worked example: the first sample student against the first sample internship."""
    service = MatchingService(catalog=SAMPLE_CATALOG, engine=engine)
    student = SAMPLE_STUDENTS[0]
    internship = SAMPLE_INTERNSHIPS[0]
    match = service.evaluate(student, internship)
    return {
        "student_label": SAMPLE_STUDENT_NAMES.get(student.id, student.id),
        "internship_label": internship.title or internship.id,
        "match": match.to_dict(),
        "contribution_rows": build_contribution_rows(match),
    }


@dataclass
class MatchingReport:
    generated_at: datetime
    summary: Dict[str, Any]
    signal_table: List[Dict[str, Any]]
    sample: Dict[str, Any]
    canonical_enums: Dict[str, List[str]] = field(default_factory=lambda: MATCHING_CANONICAL_ENUMS)
    data_sources: List[Dict[str, str]] = field(default_factory=lambda: MATCHING_DATA_SOURCES)
    major_internship_matrix: List[Dict[str, Any]] = field(default_factory=lambda: MAJOR_INTERNSHIP_MATRIX)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": format_timestamp(self.generated_at),
            "summary": self.summary,
            "signal_table": self.signal_table,
            "canonical_enums": self.canonical_enums,
            "data_sources": self.data_sources,
            "quality_over_quantity": {
                "bullets": QUALITY_OVER_QUANTITY_BULLETS,
                "messaging": DIFFERENTIATION_MESSAGING,
                "risks_and_mitigations": DIFFERENTIATION_RISKS_AND_MITIGATIONS,
            },
            "major_internship_matrix": self.major_internship_matrix,
            "sample": self.sample,
        }


def build_matching_report(
    model: Optional[ScoringModel] = None,
    generated_at: Optional[datetime] = None,
) -> MatchingReport:
    """Assemble the full admin report for a scoring model."""
    model = model or DEFAULT_SCORING_MODEL
    return MatchingReport(
        generated_at=generated_at or utc_now(),
        summary=build_report_summary(model),
        signal_table=build_signal_table(model),
        sample=build_sample_breakdown(MatchingEngine(model)),
    )
