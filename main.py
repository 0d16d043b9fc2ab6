#!/usr/bin/env python
"""CLI for Relation Radar."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator

from relation_radar.analysis import RelationAnalyzer
from relation_radar.config import create_from_config, get_default_config_path, load_config
from relation_radar.data import (
    AnalysisOptions,
    AnalysisResult,
    DateRange,
    DetailLevel,
    SearchQuery,
)
from relation_radar.errors import NoDataError, RadarError

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["search", "analyze", "show", "list", "seed", "analyze-many"]
    config: Path
    log: bool = False
    log_dir: str = "logs"
    # search / analyze / show
    text: str = ""
    sources: list[str] = []
    date_from: str | None = None
    date_to: str | None = None
    limit: int = 10
    # analyze
    year_from: int | None = None
    year_to: int | None = None
    no_individuals: bool = False
    detail: DetailLevel = DetailLevel.DETAILED
    # list
    filter: str | None = None
    sort_by: str = "name"
    # seed / analyze-many
    keywords: list[str] = []
    subjects: list[str] = []
    file: Path | None = None

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v

    @model_validator(mode="after")
    def batch_needs_input(self) -> "CLIArgs":
        if self.command == "analyze-many" and not (self.subjects or self.file):
            raise ValueError("Give subjects or --file")
        if self.file is not None and not self.file.exists():
            raise ValueError(f"Subject file not found: {self.file}")
        return self


def read_subjects(path: Path) -> list[str]:
    """One subject per line; blank lines and ``#`` comments are skipped."""
    lines = (line.strip() for line in path.read_text(encoding="utf-8").splitlines())
    return [line for line in lines if line and not line.startswith("#")]


def print_result(result: AnalysisResult) -> None:
    logger.info(f"\n{result.subject_name}: relation score {result.relation_score}/10")
    logger.info(f"Articles analyzed: {result.article_count}")
    logger.info(f"\n{result.summary_text}")

    if result.key_events:
        logger.info("\n--- Key Events ---")
        for event in result.key_events:
            logger.info(f"{event.date or 'unknown date'}  {event.title} ({event.source})")
            logger.info(f"   {event.url}")

    if result.key_people:
        logger.info("\n--- Key People ---")
        for person in result.key_people:
            logger.info(
                f"{person.name} ({person.role}): {person.mention_count} mentions, "
                f"{person.relation_tier} relation"
            )

    for title, connections in (
        ("Institution Connections", result.institution_connections),
        ("Party Connections", result.party_connections),
    ):
        if connections:
            logger.info(f"\n--- {title} ---")
            for connection in connections:
                logger.info(
                    f"{connection.entity_name}: {connection.mention_count} mentions "
                    f"in {len(connection.supporting_articles)} articles"
                )


async def run(args: CLIArgs) -> None:
    """Execute one command with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    analyzer, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )
    logger.info(f"Config: {args.config}")

    if args.command == "search":
        await run_search(analyzer, args)
    elif args.command == "analyze":
        print_result(await analyzer.analyze(args.text, analysis_options(args)))
    elif args.command == "analyze-many":
        await run_analyze_many(analyzer, args)
    elif args.command == "seed":
        await run_seed(analyzer, args)
    elif args.command == "show":
        print_result(analyzer.require_analysis(args.text))
    else:
        rows = analyzer.list_analyses(filter=args.filter, sort_by=args.sort_by, limit=args.limit)
        print(f"\n{len(rows)} analyzed subjects:\n")
        for row in rows:
            logger.info(
                f"{row.name}: {row.relation_score}/10, {row.article_count} articles, "
                f"last analyzed {row.last_analyzed}"
            )

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


async def run_search(analyzer: RelationAnalyzer, args: CLIArgs) -> None:
    date_range = None
    if args.date_from or args.date_to:
        date_range = DateRange(start=args.date_from, end=args.date_to)
    query = SearchQuery(
        terms=args.text,
        sources=tuple(args.sources),
        date_range=date_range,
        limit=args.limit,
    )
    articles = await analyzer.search(query)

    print(f"\nFound {len(articles)} unique articles:\n")
    for i, article in enumerate(articles, 1):
        logger.info(f"{i}. {article.title}")
        logger.info(f"   Source: {article.source}")
        logger.info(f"   URL: {article.url}")
        if article.published_date:
            logger.info(f"   Published: {article.published_date}")


def analysis_options(args: CLIArgs) -> AnalysisOptions:
    return AnalysisOptions(
        year_from=args.year_from,
        year_to=args.year_to,
        include_individuals=not args.no_individuals,
        detail_level=args.detail,
    )


async def run_analyze_many(analyzer: RelationAnalyzer, args: CLIArgs) -> None:
    subjects = list(args.subjects)
    if args.file is not None:
        subjects += read_subjects(args.file)
    logger.info(f"Analyzing {len(subjects)} subjects")

    results = await analyzer.analyze_many(subjects, analysis_options(args))

    print(f"\n{len(results)} of {len(subjects)} subjects analyzed, by relation score:\n")
    for i, result in enumerate(results, 1):
        logger.info(
            f"{i}. {result.subject_name}: {result.relation_score}/10 "
            f"({result.article_count} articles)"
        )


async def run_seed(analyzer: RelationAnalyzer, args: CLIArgs) -> None:
    date_range = None
    if args.date_from or args.date_to:
        date_range = DateRange(start=args.date_from, end=args.date_to)
    report = await analyzer.seed_corpus(
        args.keywords, sources=args.sources, date_range=date_range, limit=args.limit
    )

    logger.info(f"\nSearched {report.keyword_count} keywords")
    logger.info(f"Articles found: {report.total_found}")
    logger.info(f"Bodies fetched: {report.newly_fetched}")
    if report.failed_keywords:
        logger.info(f"Failed keywords: {', '.join(report.failed_keywords)}")


def _add_analysis_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--year-from", type=int)
    parser.add_argument("--year-to", type=int)
    parser.add_argument("--no-individuals", action="store_true", default=False)
    parser.add_argument(
        "--detail", choices=[level.value for level in DetailLevel], default="detailed"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find news coverage of a subject and score its ties to government and party."
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Write a JSON run log per search",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Search the corpus, then online sources")
    search.add_argument("text", help="Query terms; quote phrases to keep them together")
    search.add_argument("--source", dest="sources", action="append", default=[])
    search.add_argument("--from", dest="date_from", help="Earliest date, YYYY-MM-DD")
    search.add_argument("--to", dest="date_to", help="Latest date, YYYY-MM-DD")
    search.add_argument("--limit", type=int, default=10)

    analyze = commands.add_parser("analyze", help="Analyze a company or person")
    analyze.add_argument("text", metavar="subject")
    _add_analysis_arguments(analyze)

    many = commands.add_parser(
        "analyze-many", help="Analyze several subjects and rank them by relation score"
    )
    many.add_argument("subjects", nargs="*", metavar="subject")
    many.add_argument(
        "--file", "-f", type=Path, help="Subjects, one per line; # starts a comment"
    )
    _add_analysis_arguments(many)

    seed = commands.add_parser("seed", help="Fill the corpus with results for many keywords")
    seed.add_argument("keywords", nargs="+", metavar="keyword")
    seed.add_argument("--source", dest="sources", action="append", default=[])
    seed.add_argument("--from", dest="date_from", help="Earliest date, YYYY-MM-DD")
    seed.add_argument("--to", dest="date_to", help="Latest date, YYYY-MM-DD")
    seed.add_argument("--limit", type=int, default=20, help="Articles per keyword")

    show = commands.add_parser("show", help="Show a stored analysis")
    show.add_argument("text", metavar="subject")

    listing = commands.add_parser("list", help="List stored analyses")
    listing.add_argument("--filter", help='e.g. "high relation" or part of a name')
    listing.add_argument(
        "--sort-by",
        choices=["name", "relation_score", "article_count", "last_analyzed"],
        default="name",
    )
    listing.add_argument("--limit", type=int, default=20)
    return parser


def main() -> None:
    """Entry point for the CLI."""
    parser = build_parser()

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    fields = {k: v for k, v in vars(ns).items() if k != "config" and v is not None}
    try:
        args = CLIArgs(config=config_path, **fields)
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except NoDataError as e:
        logger.error(str(e))
        sys.exit(2)
    except RadarError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
