"""Export functions for match results in multiple formats."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from scholarmatch.matching.matcher import MatchScore
from scholarmatch.matching.probability import classify_success_tier
from scholarmatch.matching.strategic import classify_strategic_value


def _format_amount(amount: float) -> str:
    """Format a dollar amount, or 'Varies' when unknown."""
    if not amount:
        return "Varies"
    return f"${amount:,.0f}"


def export_json(
    matches: Sequence[MatchScore],
    filepath: str,
    student_id: Optional[str] = None,
) -> None:
    """Export match results to JSON format.

    Matches are written in the order given, so rank them first.

    Args:
        matches: Match results
        filepath: Path to write JSON file
        student_id: Optional ID of the scored student

    Raises:
        IOError: If file cannot be written
    """
    export_data = {
        "exported_at": datetime.now().isoformat(),
        "student_id": student_id,
        "total_matches": len(matches),
        "matches": [
            {"rank": i, **match.to_dict()}
            for i, match in enumerate(matches, 1)
        ],
    }

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(export_data, f, indent=2, ensure_ascii=False)


def export_csv(
    matches: Sequence[MatchScore],
    filepath: str,
) -> None:
    """Export match results to CSV format.

    Args:
        matches: Match results
        filepath: Path to write CSV file

    Raises:
        IOError: If file cannot be written
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "rank",
        "scholarship_id",
        "name",
        "amount",
        "overall_match_score",
        "academic",
        "demographic",
        "major_field",
        "experience",
        "financial",
        "special",
        "success_probability",
        "strategic_value",
        "effort",
        "priority_tier",
    ]

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()

        for i, match in enumerate(matches, 1):
            writer.writerow({
                "rank": i,
                "scholarship_id": match.scholarship_id,
                "name": match.scholarship_name,
                "amount": _format_amount(match.award_amount),
                "overall_match_score": match.overall_match_score,
                "academic": match.academic_score,
                "demographic": match.demographic_score,
                "major_field": match.major_field_score,
                "experience": match.experience_score,
                "financial": match.financial_score,
                "special": match.special_criteria_score,
                "success_probability": f"{match.success_probability}%",
                "strategic_value": f"{match.strategic_value:.1f}",
                "effort": match.application_effort.value,
                "priority_tier": match.priority_tier.value,
            })


def export_markdown(
    matches: Sequence[MatchScore],
    filepath: str,
) -> None:
    """Export match results to Markdown format.

    Args:
        matches: Match results
        filepath: Path to write Markdown file

    Raises:
        IOError: If file cannot be written
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    lines: List[str] = []

    lines.append("# Scholarship Matches")
    lines.append("")
    lines.append(f"**Exported:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"**Total Matches:** {len(matches)}")
    lines.append("")
    lines.append("---")
    lines.append("")

    for i, match in enumerate(matches, 1):
        lines.append(f"## {i}. {match.scholarship_name}")
        lines.append("")
        lines.append(f"**Amount:** {_format_amount(match.award_amount)}")
        lines.append(f"**Match Score:** {match.overall_match_score}/100")
        lines.append(f"**Success:** {classify_success_tier(match.success_probability).display()}")

        strategic = classify_strategic_value(match.strategic_value)
        lines.append(f"**Strategic Value:** {match.strategic_value:.1f} ({strategic.label})")
        lines.append(
            f"**Effort:** {match.application_effort.value} "
            f"({match.effort_breakdown.describe()})"
        )
        lines.append(f"**Priority:** {match.tier_rationale}")
        lines.append("")

        lines.append("| Dimension | Score |")
        lines.append("|---|---|")
        for dimension, score in match.dimension_scores.items():
            lines.append(f"| {dimension.replace('_', ' ').title()} | {score} |")
        lines.append("")
        lines.append("---")
        lines.append("")

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))


def export_matches(
    matches: Sequence[MatchScore],
    filepath: str,
) -> None:
    """Export match results with format auto-detection from file extension.

    Args:
        matches: Match results, already ranked
        filepath: Path to write file (extension determines format)

    Raises:
        ValueError: If file extension is not recognized
        IOError: If file cannot be written
    """
    path = Path(filepath)
    extension = path.suffix.lower()

    if extension == ".json":
        export_json(matches, filepath)
    elif extension == ".csv":
        export_csv(matches, filepath)
    elif extension in (".md", ".markdown"):
        export_markdown(matches, filepath)
    else:
        raise ValueError(
            f"Unsupported file format: {extension}. "
            "Supported formats: .json, .csv, .md, .markdown"
        )
