"""Bundled sample data for the admin report and the sanity script.

The first student and first internship drive the worked sample breakdown in
the matching report, so their shape is part of the report's contract.
"""

from typing import List

from internmatch.catalog.models import CanonicalCatalog
from internmatch.domain.models import RawInternship, RawStudentProfile

SAMPLE_CATALOG = CanonicalCatalog.model_validate(
    {
        "skills": [
            {"id": "skill-excel", "name": "Excel", "aliases": ["microsoft excel", "ms excel"]},
            {"id": "skill-financial-modeling", "name": "Financial Modeling", "aliases": ["financial modelling"]},
            {"id": "skill-powerpoint", "name": "PowerPoint", "aliases": ["ms powerpoint"]},
            {"id": "skill-accounting", "name": "Accounting"},
            {"id": "skill-sql", "name": "SQL", "aliases": ["structured query language"]},
            {"id": "skill-python", "name": "Python"},
            {"id": "skill-tableau", "name": "Tableau"},
            {"id": "skill-communication", "name": "Communication"},
        ],
        "coursework_categories": [
            {"id": "cw-corporate-finance", "name": "Corporate Finance / Valuation"},
            {"id": "cw-financial-accounting", "name": "Financial Accounting"},
            {"id": "cw-statistics", "name": "Statistics / Probability"},
            {"id": "cw-databases", "name": "SQL / Databases"},
            {"id": "cw-machine-learning", "name": "Machine Learning"},
            {"id": "cw-operations", "name": "Operations / Supply Chain"},
        ],
        "coursework_items": [
            {"id": "item-valuation", "name": "Valuation", "category_id": "cw-corporate-finance"},
            {"id": "item-accounting-101", "name": "Accounting", "aliases": ["intro to accounting"],
             "category_id": "cw-financial-accounting"},
            {"id": "item-database-systems", "name": "Database Systems", "category_id": "cw-databases"},
            {"id": "item-ml", "name": "Machine Learning", "aliases": ["intro to ml"],
             "category_id": "cw-machine-learning"},
        ],
        "majors": [
            {"id": "major-finance", "name": "Finance"},
            {"id": "major-accounting", "name": "Accounting"},
            {"id": "major-data-science", "name": "Data Science"},
            {"id": "major-statistics", "name": "Statistics"},
            {"id": "major-computer-science", "name": "Computer Science", "aliases": ["cs"]},
            {"id": "major-operations", "name": "Operations"},
            {"id": "major-business", "name": "Business", "aliases": ["business administration"]},
        ],
    }
)

SAMPLE_STUDENTS: List[RawStudentProfile] = [
    RawStudentProfile.model_validate(
        {
            "id": "student_1",
            "school": "Sample State University",
            "majors": ["finance"],
            "year": "junior",
            "experience_level": "projects",
            "skills": ["excel", "financial modeling", "powerpoint"],
            "coursework": ["valuation", "accounting"],
            "availability_start_month": "June",
            "availability_hours_per_week": 20,
            "preferred_city": "New York",
            "preferred_state": "NY",
            "preferred_work_modes": ["hybrid", "remote"],
        }
    ),
    RawStudentProfile.model_validate(
        {
            "id": "student_2",
            "school": "Sample State University",
            "majors": ["data science", "statistics"],
            "year": "senior",
            "experience_level": "internship",
            "skills": ["sql", "python", "tableau"],
            "coursework": ["machine learning", "database systems"],
            "availability_start_month": "September",
            "availability_hours_per_week": 30,
            "preferred_work_modes": ["remote"],
            "remote_only": True,
        }
    ),
]

# Display labels for the sample students
SAMPLE_STUDENT_NAMES = {
    "student_1": "Finance student (Summer, 20h)",
    "student_2": "Data student (Fall, remote-only)",
}

SAMPLE_INTERNSHIPS: List[RawInternship] = [
    RawInternship.model_validate(
        {
            "id": "internship_finance_1",
            "title": "Private Equity Summer Analyst",
            "majors": ["finance", "accounting"],
            "hours_per_week": 20,
            "location": "New York, NY (Hybrid)",
            "experience_level": "entry",
            "target_student_years": ["junior", "senior"],
            "recommended_coursework": ["Corporate Finance / Valuation"],
            "description": (
                "Work on live deal support.\n"
                "Category: Finance\n"
                "Season: Summer 2026\n"
                "Required skills: excel, financial modeling\n"
                "Preferred skills: powerpoint, accounting"
            ),
            "created_at": "2026-01-15T12:00:00Z",
        }
    ),
    RawInternship.model_validate(
        {
            "id": "internship_data_1",
            "title": "Data Analytics Intern",
            "majors": ["data science", "computer science"],
            "hours_per_week": 25,
            "location": "Remote (Remote)",
            "remote_allowed": True,
            "recommended_coursework": ["SQL / Databases", "Statistics / Probability"],
            "description": (
                "Build weekly dashboards.\n"
                "Category: Data\n"
                "Season: Fall 2026\n"
                "Required skills: sql, python\n"
                "Preferred skills: tableau, experimentation"
            ),
            "created_at": "2026-01-20T12:00:00Z",
        }
    ),
    RawInternship.model_validate(
        {
            "id": "internship_ops_1",
            "title": "Operations Intern",
            "majors": ["operations", "business"],
            "hours_per_week": 35,
            "location": "Chicago, IL (On-site)",
            "description": (
                "Support fulfillment projects.\n"
                "Category: Operations\n"
                "Season: Summer 2026\n"
                "Required skills: excel\n"
                "Preferred skills: communication"
            ),
            "created_at": "2026-01-10T12:00:00Z",
        }
    ),
]
