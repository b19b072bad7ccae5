"""Output module for exporting ranked match results."""

from scholarmatch.output.export import (
    export_csv,
    export_json,
    export_markdown,
    export_matches,
)

__all__ = [
    "export_json",
    "export_csv",
    "export_markdown",
    "export_matches",
]
