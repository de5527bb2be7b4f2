"""Score and grade calculation."""

from typing import Mapping, Union

from .models import MetricValue, NormalizedResults

GRADES = ["E", "D", "C", "B", "A", "Z"]
GRADE_BUCKET_SIZE = 20

EXPLANATIONS = {
    "Z": "has excellent website security. They have passed every test.",
    "A": "has very good security. They have passed almost every test.",
    "B": "has above average security. They have passed most of the tests.",
    "C": "has average security. They have failed around half of the tests.",
    "D": "has below average security. They have failed most of the tests.",
    "E": "has very bad security. They have failed almost every one of the tests.",
}

Results = Union[NormalizedResults, Mapping[str, Mapping[str, MetricValue]]]


def count_metrics(results: Results) -> tuple:
    """Return (passed, total) over the scorable (boolean) metrics."""
    if isinstance(results, NormalizedResults):
        results = results.as_mapping()
    passed = 0
    total = 0
    for metrics in results.values():
        for value in metrics.values():
            if isinstance(value, str):
                continue
            total += 1
            if value:
                passed += 1
    return passed, total


def compute_score(results: Results) -> int:
    """Percentage of passed scorable metrics, rounded half up.

    Informational (string) metrics are ignored. With no scorable metrics the
    score is 0.
    """
    passed, total = count_metrics(results)
    if not total:
        return 0
    # round(100 * passed / total) with ties going up, in integer arithmetic
    return (200 * passed + total) // (2 * total)


def score_to_grade(score: int) -> str:
    if not 0 <= score <= 100:
        raise ValueError(f"Score out of range: {score}")
    return GRADES[score // GRADE_BUCKET_SIZE]


def grade_explanation(grade: str) -> str:
    return EXPLANATIONS[grade]
