"""Range-based factor scoring for score nodes."""

from typing import Any, Dict, List, Mapping, Tuple

from decision_engine.models.schemas.workflow import ScoreFactor, ScoreRange
from decision_engine.services.workflow_engine.variables import to_number


class ScoringEngine:
    """
    Weighted scoring of applicant variables against configured ranges.

    Each factor reads one variable, awards the score of the first range that
    contains it (0 when none does) and multiplies it by the factor weight.
    """

    @staticmethod
    def find_range_score(ranges: List[ScoreRange], value: Any) -> float:
        """
        Find the score of the first range containing the value.

        Ranges are inclusive on both ends and scanned in listed order.

        Args:
            ranges: Configured ranges for the factor
            value: Variable value (numbers, booleans and numeric strings)

        Returns:
            The matching range's score, or 0 when nothing matches
        """
        number = to_number(value)
        if number is None:
            return 0

        for score_range in ranges:
            if score_range.min <= number <= score_range.max:
                return score_range.score

        return 0

    @staticmethod
    def score_factors(
        factors: List[ScoreFactor],
        variables: Mapping[str, Any],
    ) -> Tuple[float, Dict[str, Dict[str, float]]]:
        """
        Score every factor and accumulate the weighted total.

        Args:
            factors: Configured scoring factors
            variables: Current variable bindings

        Returns:
            Total weighted score and a per-factor breakdown keyed by factor name
        """
        total = 0
        breakdown: Dict[str, Dict[str, float]] = {}

        for factor in factors:
            raw_score = ScoringEngine.find_range_score(
                factor.ranges, variables.get(factor.variable)
            )
            weighted_score = raw_score * factor.weight
            breakdown[factor.label] = {
                "raw_score": raw_score,
                "weight": factor.weight,
                "weighted_score": weighted_score,
            }
            total += weighted_score

        return total, breakdown
