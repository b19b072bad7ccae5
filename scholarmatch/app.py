"""ScholarMatch command line entry point."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scholarmatch.config import LOG_PATH, ensure_data_dir, load_profile, load_scholarships, load_settings
from scholarmatch.errors import ScholarMatchError
from scholarmatch.matching.analysis import EligibilityAnalysis
from scholarmatch.matching.matcher import MatchEngine, MatchScore
from scholarmatch.output.export import export_matches

logger = logging.getLogger(__name__)

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Configure application logging."""
    ensure_data_dir()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    log_path = str(LOG_PATH.resolve())
    has_file_handler = any(
        isinstance(handler, logging.FileHandler)
        and handler.baseFilename == log_path
        for handler in root_logger.handlers
    )
    if not has_file_handler:
        file_handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setLevel(logging.DEBUG)
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scholarmatch",
        description="Score a student profile against scholarship eligibility criteria",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    score = subparsers.add_parser("score", help="Score and rank every scholarship")
    score.add_argument("profile", type=Path, help="Student profile YAML file")
    score.add_argument("scholarships", type=Path, help="Scholarships YAML or JSON file")
    score.add_argument("--settings", type=Path, help="Engine settings YAML file")
    score.add_argument("--export", metavar="PATH", help="Write ranked results to .json, .csv or .md")
    score.add_argument("--top", type=int, default=None, help="Show only the top N matches")

    analyze = subparsers.add_parser("analyze", help="Explain eligibility for one scholarship")
    analyze.add_argument("profile", type=Path, help="Student profile YAML file")
    analyze.add_argument("scholarships", type=Path, help="Scholarships YAML or JSON file")
    analyze.add_argument("--id", required=True, dest="scholarship_id", help="Scholarship ID")
    analyze.add_argument("--settings", type=Path, help="Engine settings YAML file")

    return parser


def render_matches(matches: List[MatchScore]) -> Table:
    """Build a rich table of ranked match results."""
    table = Table(title="Scholarship Matches")
    table.add_column("#", justify="right")
    table.add_column("Scholarship")
    table.add_column("Award", justify="right")
    table.add_column("Match", justify="right")
    table.add_column("Success", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Effort")
    table.add_column("Priority")

    for i, match in enumerate(matches, 1):
        table.add_row(
            str(i),
            escape(match.scholarship_name),
            f"${match.award_amount:,.0f}" if match.award_amount else "Varies",
            str(match.overall_match_score),
            f"{match.success_probability}%",
            f"{match.strategic_value:.1f}",
            match.application_effort.value,
            match.priority_tier.value,
        )
    return table


def render_analysis(name: str, analysis: EligibilityAnalysis) -> None:
    """Print an eligibility analysis."""
    console.print(
        f"[bold]{escape(name)}[/bold]: {analysis.overall_score}/100 - "
        f"{analysis.overall_assessment.value}"
    )

    table = Table()
    table.add_column("Dimension")
    table.add_column("Score", justify="right")
    table.add_column("Explanation")
    for dimension, result in analysis.dimensions.items():
        table.add_row(dimension.replace("_", " ").title(), str(result.score), escape(result.explanation))
    console.print(table)

    gaps = analysis.gap_analysis
    console.print(f"Criteria met: {gaps.met_criteria}/{gaps.total_criteria}")
    for item in gaps.missing_criteria:
        console.print(f"  [red]✗[/red] {escape(item)}")

    console.print("[bold]Recommendations[/bold]")
    for item in analysis.recommendations:
        console.print(f"  • {escape(item)}")

    positioning = analysis.competitive_positioning
    console.print(f"{positioning.message} {positioning.context}")


def run_score(args: argparse.Namespace) -> int:
    engine = MatchEngine(load_settings(args.settings))
    profile = load_profile(args.profile)
    scholarships = load_scholarships(args.scholarships)

    matches = engine.rank(engine.compute_match_scores_batch(profile, scholarships))

    if args.export:
        export_matches(matches, args.export)
        console.print(f"Exported {len(matches)} matches to {args.export}")

    shown = matches[: args.top] if args.top else matches
    console.print(render_matches(shown))
    return 0


def run_analyze(args: argparse.Namespace) -> int:
    engine = MatchEngine(load_settings(args.settings))
    profile = load_profile(args.profile)
    scholarships = load_scholarships(args.scholarships)

    scholarship = next((s for s in scholarships if s.id == args.scholarship_id), None)
    if scholarship is None:
        console.print(f"[red]No scholarship with ID {escape(args.scholarship_id)}[/red]")
        return 1

    analysis = engine.compute_eligibility_analysis(profile, scholarship)
    render_analysis(scholarship.name, analysis)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "score":
            return run_score(args)
        return run_analyze(args)
    except (ScholarMatchError, ValueError, yaml.YAMLError) as e:
        logger.error(f"{args.command} failed: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
