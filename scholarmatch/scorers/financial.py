"""Financial dimension scorer."""

import re
from typing import List, Optional

from scholarmatch.criteria import FinancialCriteria
from scholarmatch.profile.models import FinancialNeedLevel, StudentProfile
from scholarmatch.scorers.base import (
    CriterionCheck,
    DimensionScorer,
    MatchStatus,
    clamp_score,
    status_for,
)

_NUMBER = re.compile(r"\d+(?:\.\d+)?")


def parse_efc_upper_bound(efc_range: Optional[str]) -> Optional[float]:
    """Return the upper bound of an EFC range string.

    Examples: "0-5000" -> 5000, "$5,001 - $10,000" -> 10000, "20000+" -> 20000.
    Returns None when the string holds no number.
    """
    if not efc_range:
        return None
    numbers = _NUMBER.findall(efc_range.replace(",", ""))
    if not numbers:
        return None
    return float(numbers[-1])


class FinancialScorer(DimensionScorer):
    """Scores financial need level, Pell Grant eligibility and EFC."""

    WEIGHT_NEED = 0.5
    WEIGHT_PELL = 0.3
    WEIGHT_EFC = 0.2

    @property
    def name(self) -> str:
        return "financial"

    @property
    def label(self) -> str:
        return "Financial"

    def _check_criteria(
        self, profile: StudentProfile, criteria: FinancialCriteria
    ) -> List[CriterionCheck]:
        financial = profile.financial
        checks: List[CriterionCheck] = []

        if criteria.requires_financial_need is not None:
            checks.append(self._check_need(financial.financial_need, criteria))

        if criteria.pell_grant_required is not None:
            pell = financial.pell_grant_eligible
            required = criteria.pell_grant_required
            score = 100.0 if pell == required else 0.0
            checks.append(CriterionCheck(
                "pell_grant", score, self.WEIGHT_PELL, status_for(score, pell), pell, required,
            ))

        if criteria.max_efc is not None:
            checks.append(self._check_efc(financial.efc_range, criteria.max_efc))

        return checks

    def _check_need(
        self, need: Optional[FinancialNeedLevel], criteria: FinancialCriteria
    ) -> CriterionCheck:
        """Check need against an optional minimum need level.

        A level below the required one scores proportionally on the
        LOW=1 .. VERY_HIGH=4 scale.
        """
        level = criteria.financial_need_level
        required = level.value if level else True
        if not criteria.requires_financial_need:
            return CriterionCheck(
                "financial_need", 100.0, self.WEIGHT_NEED, MatchStatus.NOT_APPLICABLE,
                need.value if need else None, False,
            )
        if need is None:
            return CriterionCheck(
                "financial_need", 0.0, self.WEIGHT_NEED, MatchStatus.UNKNOWN, None, required,
            )

        if level is None or need.rank >= level.rank:
            score = 100.0
        else:
            score = need.rank / level.rank * 100
        return CriterionCheck(
            "financial_need", score, self.WEIGHT_NEED, status_for(score, need.value), need.value, required,
        )

    def _check_efc(self, efc_range: Optional[str], max_efc: float) -> CriterionCheck:
        """Compare the top of the student's EFC range with the maximum allowed."""
        upper = parse_efc_upper_bound(efc_range)
        if upper is None:
            return CriterionCheck("efc", 0.0, self.WEIGHT_EFC, MatchStatus.UNKNOWN, None, max_efc)
        if upper <= max_efc:
            score = 100.0
        else:
            score = clamp_score(max_efc / upper * 100)
        return CriterionCheck(
            "efc",
            score,
            self.WEIGHT_EFC,
            status_for(score, upper),
            upper,
            max_efc,
            upper - max_efc if upper > max_efc else None,
        )
