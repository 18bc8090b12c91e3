#!/usr/bin/env python3
"""Sanity check for the matching model against the bundled sample data.

Prints, for every sample student, the ranked internships with their scores,
top reasons and gaps, then the applicant ranking for every internship. Use it
after changing weights or thresholds to eyeball that rankings still make sense.

Usage:
    python scripts/matching_sanity.py
    python scripts/matching_sanity.py --config config.yaml
    python scripts/matching_sanity.py --dataset data/sample_dataset.yaml
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from internmatch.config import ConfigurationError, load_config
from internmatch.domain.dataset import DatasetError
from internmatch.logging import configure_logging
from internmatch.main import resolve_dataset
from internmatch.matching import MatchingService, build_scoring_model


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def print_ranking(rows, reason_limit: int):
    """Print one ranking as a table followed by its reasons and gaps."""
    if not rows:
        print("  (nothing to rank)")
        return

    label_width = max(len(label) for label, _ in rows)
    print(f"  {'#':>2}  {'Candidate':<{label_width}}  {'Score':>7}  {'Norm':>5}")
    print("  " + "-" * (label_width + 20))
    for position, (label, match) in enumerate(rows, 1):
        print(
            f"  {position:>2}  {label:<{label_width}}  "
            f"{match.score:>7.2f}  {match.normalized_score:>5.2f}"
        )
        for reason in match.reason_texts(reason_limit):
            print(f"        + {reason}")
        for gap in match.gap_texts():
            print(f"        - {gap}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Print sample rankings for the matching model")
    parser.add_argument("--config", type=Path, default=None, help="Path to configuration file")
    parser.add_argument("--dataset", default=None, help="Dataset YAML (default: bundled sample)")
    args = parser.parse_args()

    load_dotenv()

    try:
        app_config, env_config = load_config(args.config)
        configure_logging(level="WARNING", format_type="key-value", stream=sys.stderr)
        model = build_scoring_model(app_config.matching)
        dataset = resolve_dataset(args.dataset, app_config)
    except (ConfigurationError, DatasetError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    service = MatchingService(catalog=dataset.catalog, model=model)
    reason_limit = app_config.matching.reason_display_limit

    print_header(f"Matching model {model.version} (max score {model.max_score:g})")
    for signal in model.signals:
        print(f"  {signal.key.value:<22} {signal.weight:>5g}  {signal.kind.value}")

    for student_row in dataset.students:
        print_header(f"Internships for {student_row.id}")
        ranked = service.rank_internships(student_row, dataset.internships)
        print_ranking(
            [(item.internship.title or item.internship.internship_id, item.match) for item in ranked],
            reason_limit,
        )

    for internship_row in dataset.internships:
        print_header(f"Applicants for {internship_row.title or internship_row.id}")
        ranked = service.rank_applicants(internship_row, dataset.students)
        print_ranking([(item.student.student_id, item.match) for item in ranked], reason_limit)

    return 0


if __name__ == "__main__":
    sys.exit(main())
