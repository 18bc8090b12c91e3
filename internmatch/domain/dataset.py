"""YAML datasets: a canonical catalog plus student and internship rows.

The CLI and the tests work from datasets shaped like::

    catalog:
      skills: [{id: skill-sql, name: SQL, aliases: [structured query language]}]
      coursework_categories: [...]
      coursework_items: [...]
      majors: [...]
    students:
      - {id: stu-1, major_id: major-finance, skills: [Excel], ...}
    internships:
      - {id: int-1, title: Summer Analyst, required_skills: [SQL], ...}
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from internmatch.catalog.models import CanonicalCatalog
from internmatch.logging import get_logger

from .models import RawInternship, RawStudentProfile

logger = get_logger(__name__, component="dataset")

RowT = TypeVar("RowT", bound=BaseModel)


class DatasetError(Exception):
    """A dataset file is missing, unreadable, or has invalid rows."""

    def __init__(self, message: str, errors: List[str] = None):
        self.message = message
        self.errors = list(errors or [])
        details = "".join(f"\n  - {error}" for error in self.errors)
        super().__init__(f"{message}{details}")


@dataclass
class Dataset:
    """Rows to score, with the catalog their labels resolve against."""

    catalog: CanonicalCatalog = field(default_factory=CanonicalCatalog)
    students: List[RawStudentProfile] = field(default_factory=list)
    internships: List[RawInternship] = field(default_factory=list)

    def student(self, student_id: str) -> RawStudentProfile:
        """Look up a student row by id.

        Raises:
            DatasetError: If no student has that id
        """
        for row in self.students:
            if row.id == student_id:
                return row
        raise DatasetError(f"Student not found in dataset: {student_id}")

    def internship(self, internship_id: str) -> RawInternship:
        """Look up an internship row by id.

        Raises:
            DatasetError: If no internship has that id
        """
        for row in self.internships:
            if row.id == internship_id:
                return row
        raise DatasetError(f"Internship not found in dataset: {internship_id}")


def load_dataset(path: Union[str, Path]) -> Dataset:
    """Read and validate a dataset file.

    Raises:
        DatasetError: If the file cannot be read, is not a mapping, or has
            invalid or duplicate rows
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f)
    except FileNotFoundError:
        raise DatasetError(f"Dataset file not found: {path}")
    except yaml.YAMLError as e:
        raise DatasetError(f"Failed to parse dataset YAML {path}: {e}")
    except OSError as e:
        raise DatasetError(f"Failed to read dataset file {path}: {e}")

    dataset = parse_dataset(loaded or {}, source=str(path))
    logger.info(
        f"Loaded dataset from {path}",
        extra={
            "event": "dataset.loaded",
            "students": len(dataset.students),
            "internships": len(dataset.internships),
            **{f"catalog_{kind}": size for kind, size in dataset.catalog.sizes().items()},
        },
    )
    return dataset


def parse_dataset(data: Dict[str, Any], source: str = "<dataset>") -> Dataset:
    """Validate an already-loaded dataset mapping."""
    if not isinstance(data, dict):
        raise DatasetError(f"Dataset {source} must contain a mapping at the top level")

    errors: List[str] = []

    try:
        catalog = CanonicalCatalog.model_validate(data.get("catalog") or {})
    except ValidationError as e:
        errors.extend(_describe(e, "catalog"))
        catalog = CanonicalCatalog()

    students = _rows(data.get("students"), RawStudentProfile, "students", errors)
    internships = _rows(data.get("internships"), RawInternship, "internships", errors)

    if errors:
        raise DatasetError(f"Invalid dataset {source}", errors=errors)

    return Dataset(catalog=catalog, students=students, internships=internships)


def _rows(raw: Any, model: Type[RowT], section: str, errors: List[str]) -> List[RowT]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        errors.append(f"{section}: expected a list of rows")
        return []

    rows: List[RowT] = []
    seen = set()
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            errors.append(f"{section}[{index}]: expected a mapping")
            continue
        try:
            row = model.model_validate(item)
        except ValidationError as e:
            errors.extend(_describe(e, f"{section}[{index}]"))
            continue
        if row.id in seen:
            errors.append(f"{section}[{index}]: duplicate id {row.id!r}")
            continue
        seen.add(row.id)
        rows.append(row)
    return rows


def _describe(error: ValidationError, prefix: str) -> List[str]:
    return [
        f"{prefix} -> {' -> '.join(str(loc) for loc in item['loc'])}: {item['msg']}"
        for item in error.errors()
    ]
