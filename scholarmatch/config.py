"""Configuration management for ScholarMatch."""

import logging
import math
import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from scholarmatch.criteria import Scholarship
from scholarmatch.profile.models import StudentProfile

logger = logging.getLogger(__name__)

# Default paths
DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_PROFILE_PATH = DATA_DIR / "profile.yaml"
DEFAULT_SCHOLARSHIPS_PATH = DATA_DIR / "scholarships.yaml"
DEFAULT_SETTINGS_PATH = DATA_DIR / "settings.yaml"
LOG_PATH = DATA_DIR / "scholarmatch.log"

ENV_MAX_WORKERS = "SCHOLARMATCH_MAX_WORKERS"
ENV_MATCH_BOOST = "SCHOLARMATCH_MATCH_BOOST"


class ScoringWeights(BaseModel):
    """Weights of the six dimensions in the overall match score (must sum to 1.0)."""

    model_config = ConfigDict(frozen=True)

    academic: float = Field(0.30, ge=0.0, le=1.0)
    demographic: float = Field(0.15, ge=0.0, le=1.0)
    major_field: float = Field(0.20, ge=0.0, le=1.0)
    experience: float = Field(0.15, ge=0.0, le=1.0)
    financial: float = Field(0.10, ge=0.0, le=1.0)
    special: float = Field(0.10, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_total(self) -> "ScoringWeights":
        total = math.fsum(self.as_dict().values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Dimension weights must sum to 1.0, got {total:.4f}")
        return self

    def as_dict(self) -> Dict[str, float]:
        return {
            "academic": self.academic,
            "demographic": self.demographic,
            "major_field": self.major_field,
            "experience": self.experience,
            "financial": self.financial,
            "special": self.special,
        }


DEFAULT_WEIGHTS = ScoringWeights()


class EngineSettings(BaseModel):
    """Tunable settings for the match engine."""

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    max_workers: Optional[int] = Field(
        None, ge=1, description="Batch worker pool size (default: CPU count)"
    )
    default_strength_score: Optional[float] = Field(
        None, ge=0.0, le=100.0,
        description="Strength used when a profile has none (default: derived from the profile)",
    )
    apply_match_boost: bool = Field(
        False, description="Boost strategic value by up to 10% for strong matches"
    )
    reference_year: Optional[int] = Field(
        None, description="Year used for age estimates (default: current year)"
    )

    @property
    def worker_count(self) -> int:
        return self.max_workers or os.cpu_count() or 1


def ensure_data_dir() -> None:
    """Ensure the data directory exists."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def _read_yaml(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """Load engine settings from YAML, then apply environment overrides.

    Args:
        path: Optional path to settings file. Defaults to data/settings.yaml.

    Returns:
        EngineSettings instance. Defaults are used if the file doesn't exist.
    """
    if path is None:
        path = DEFAULT_SETTINGS_PATH

    data = {}
    if path.exists():
        data = _read_yaml(path) or {}

    max_workers = os.getenv(ENV_MAX_WORKERS)
    if max_workers:
        data["max_workers"] = int(max_workers)

    match_boost = os.getenv(ENV_MATCH_BOOST)
    if match_boost:
        data["apply_match_boost"] = match_boost.strip().lower() in ("1", "true", "yes", "on")

    settings = EngineSettings.model_validate(data)
    logger.debug(f"Loaded settings: workers={settings.worker_count}, boost={settings.apply_match_boost}")
    return settings


def load_profile(path: Optional[Path] = None) -> Optional[StudentProfile]:
    """Load a student profile from a YAML file.

    Args:
        path: Optional path to profile file. Defaults to data/profile.yaml.

    Returns:
        StudentProfile instance, or None if the file doesn't exist or is empty.
    """
    if path is None:
        path = DEFAULT_PROFILE_PATH

    if not path.exists():
        return None

    data = _read_yaml(path)
    if data is None:
        return None

    return StudentProfile.model_validate(data)


def load_scholarships(path: Optional[Path] = None) -> List[Scholarship]:
    """Load scholarships from a YAML or JSON file.

    The file holds either a list of scholarships or a mapping with a
    ``scholarships`` list. Criteria may be nested objects or JSON strings.

    Args:
        path: Optional path to scholarships file. Defaults to data/scholarships.yaml.

    Returns:
        List of Scholarship instances (empty if the file doesn't exist)

    Raises:
        MalformedCriteriaError: If a scholarship's criteria cannot be parsed
    """
    if path is None:
        path = DEFAULT_SCHOLARSHIPS_PATH

    if not path.exists():
        return []

    data = _read_yaml(path)
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("scholarships", [])

    scholarships = [Scholarship.from_record(record) for record in data]
    logger.info(f"Loaded {len(scholarships)} scholarships from {path}")
    return scholarships
