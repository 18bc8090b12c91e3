"""Raw input rows and YAML datasets."""

from .dataset import Dataset, DatasetError, load_dataset, parse_dataset
from .models import RawInternship, RawStudentProfile

__all__ = [
    "RawStudentProfile",
    "RawInternship",
    "Dataset",
    "DatasetError",
    "load_dataset",
    "parse_dataset",
]
