"""Command-line entry point for the internship matching engine."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from dotenv import load_dotenv

from internmatch.applications.exceptions import ApplicationError
from internmatch.applications.service import ApplicationService
from internmatch.config import AppConfig, ConfigurationError, EnvironmentConfig, load_config
from internmatch.domain.dataset import Dataset, DatasetError, load_dataset
from internmatch.logging import configure_logging, get_logger
from internmatch.matching import MatchingService, MatchResult, build_scoring_model
from internmatch.persistence import PersistenceError, close_database, init_database
from internmatch.reporting import (
    PreviewFilters,
    build_matching_report,
    rank_internships_for_preview,
    student_coverage,
)
from internmatch.reporting.fixtures import SAMPLE_CATALOG, SAMPLE_INTERNSHIPS, SAMPLE_STUDENTS

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def resolve_dataset(dataset_path: Optional[str], app_config: AppConfig) -> Dataset:
    """Load the dataset named on the command line or in config, else the bundled sample."""
    path = dataset_path or app_config.dataset
    if path:
        return load_dataset(path)
    return Dataset(
        catalog=SAMPLE_CATALOG,
        students=list(SAMPLE_STUDENTS),
        internships=list(SAMPLE_INTERNSHIPS),
    )


def _match_summary(match: MatchResult, display_limit: int) -> Dict[str, Any]:
    return {
        "score": round(match.score, 3),
        "max_score": match.max_score,
        "normalized_score": round(match.normalized_score, 3),
        "matching_version": match.matching_version,
        "reasons": match.reason_texts(display_limit),
        "gaps": match.gap_texts(),
    }


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_report(
    args: argparse.Namespace,
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    service: MatchingService,
    dataset: Optional[Dataset],
) -> int:
    _print_json(build_matching_report(service.model).to_dict())
    return 0


def cmd_rank(
    args: argparse.Namespace,
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    service: MatchingService,
    dataset: Optional[Dataset],
) -> int:
    student = service.student(dataset.student(args.student))
    internships = [item for item in service.internships(dataset.internships) if item.is_active]
    ranked = service.ranker.rank_internships(student, internships)
    if args.limit is not None:
        ranked = ranked[: args.limit]

    limit = app_config.matching.reason_display_limit
    _print_json(
        [
            {
                "rank": position,
                "internship_id": item.internship.internship_id,
                "title": item.internship.title,
                **_match_summary(item.match, limit),
            }
            for position, item in enumerate(ranked, 1)
        ]
    )
    return 0


def cmd_applicants(
    args: argparse.Namespace,
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    service: MatchingService,
    dataset: Optional[Dataset],
) -> int:
    internship = service.internship(dataset.internship(args.internship))
    ranked = service.rank_applicants(internship, dataset.students)

    limit = app_config.matching.reason_display_limit
    _print_json(
        [
            {
                "rank": position,
                "student_id": item.student.student_id,
                **_match_summary(item.match, limit),
            }
            for position, item in enumerate(ranked, 1)
        ]
    )
    return 0


def cmd_apply(
    args: argparse.Namespace,
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    service: MatchingService,
    dataset: Optional[Dataset],
) -> int:
    student = dataset.student(args.student)
    internship = dataset.internship(args.internship)

    init_database(env_config.database_url)
    try:
        record = ApplicationService(service).submit(student, internship)
    finally:
        close_database()

    _print_json(record.model_dump(mode="json"))
    return 0


def cmd_preview(
    args: argparse.Namespace,
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    service: MatchingService,
    dataset: Optional[Dataset],
) -> int:
    student = service.student(dataset.student(args.student))
    filters = PreviewFilters(
        category=args.category,
        remote_only=args.remote_only,
        term=args.term,
        eligible_only=args.eligible_only,
    )
    ranked = rank_internships_for_preview(
        service.internships(dataset.internships), student, filters, engine=service.engine
    )

    limit = app_config.matching.reason_display_limit
    _print_json(
        {
            "student_id": student.student_id,
            "coverage": student_coverage(student).to_dict(),
            "filters": {
                "category": args.category,
                "remote_only": args.remote_only,
                "term": args.term,
                "eligible_only": args.eligible_only,
            },
            "results": [
                {
                    "internship_id": item.internship.internship_id,
                    "title": item.internship.title,
                    "category": item.internship.category,
                    **_match_summary(item.match, limit),
                }
                for item in ranked
            ],
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="internmatch",
        description="Internship Matching Engine - explainable student/internship match scoring",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./config.yaml or ./config/config.yaml if present)",
    )
    parser.add_argument(
        "--dataset",
        default=None,
        help="YAML dataset with catalog, students and internships (default: bundled sample data)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Print the matching model report as JSON")
    report.set_defaults(handler=cmd_report)

    rank = subparsers.add_parser("rank", help="Rank active internships for a student")
    rank.add_argument("--student", required=True, help="Student id")
    rank.add_argument("--limit", type=int, default=None, help="Show only the top N")
    rank.set_defaults(handler=cmd_rank)

    applicants = subparsers.add_parser("applicants", help="Rank dataset students for an internship")
    applicants.add_argument("--internship", required=True, help="Internship id")
    applicants.set_defaults(handler=cmd_applicants)

    apply = subparsers.add_parser("apply", help="Submit an application and store its match snapshot")
    apply.add_argument("--student", required=True, help="Student id")
    apply.add_argument("--internship", required=True, help="Internship id")
    apply.set_defaults(handler=cmd_apply)

    preview = subparsers.add_parser("preview", help="Admin preview: filtered ranking plus profile coverage")
    preview.add_argument("--student", required=True, help="Student id")
    preview.add_argument("--category", default=None, help="Only listings whose category contains this text")
    preview.add_argument("--remote-only", action="store_true", help="Only remote or remote-eligible listings")
    preview.add_argument("--term", default=None, help="Only listings whose term matches, e.g. 'summer'")
    preview.add_argument(
        "--eligible-only",
        action="store_true",
        help="Drop listings that fail a hard constraint (work mode, location, term, hours)",
    )
    preview.set_defaults(handler=cmd_preview)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the internmatch CLI.

    Returns:
        Exit code (0 for success, 1 for configuration, dataset or
        application errors).
    """
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
            stream=sys.stderr,
        )

        model = build_scoring_model(app_config.matching)
        logger.info(
            "Internship matching engine starting",
            extra={
                "event": "cli.starting",
                "command": args.command,
                "matching_version": model.version,
                "config_path": str(args.config) if args.config else None,
            },
        )

        dataset = None
        if args.command != "report":
            dataset = resolve_dataset(args.dataset, app_config)
        service = MatchingService(catalog=dataset.catalog if dataset else None, model=model)

        exit_code = args.handler(args, app_config, env_config, service, dataset)
        logger.info(
            "Command completed",
            extra={"event": "cli.completed", "command": args.command, "exit_code": exit_code},
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": type(e).__name__},
        )
        return 1
    except DatasetError as e:
        print(f"Dataset Error: {e}", file=sys.stderr)
        logger.error(f"Dataset error: {e}", extra={"event": "dataset.error"})
        return 1
    except ApplicationError as e:
        print(f"Application Error: {e}", file=sys.stderr)
        logger.warning(
            f"Application rejected: {e}",
            extra={"event": "application.rejected", "error_type": type(e).__name__},
        )
        return 1
    except PersistenceError as e:
        print(f"Database Error: {e}", file=sys.stderr)
        logger.error(f"Database error: {e}", extra={"event": "database.error"}, exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
