"""Pure risk derivations shared by the dashboard and the upload summary."""

from collections.abc import Mapping

from clauseradar.risk.models import CategoryPoint, RiskLevel

_MIN_SCORE = 0
_MAX_SCORE = 100

# (upper bound inclusive, level), checked in order
_THRESHOLDS: tuple[tuple[int, RiskLevel], ...] = (
    (30, RiskLevel.LOW),
    (60, RiskLevel.MEDIUM),
    (80, RiskLevel.HIGH),
    (_MAX_SCORE, RiskLevel.CRITICAL),
)

_LABELS: dict[RiskLevel, str] = {
    RiskLevel.LOW: "Low",
    RiskLevel.MEDIUM: "Medium",
    RiskLevel.HIGH: "High",
    RiskLevel.CRITICAL: "Critical",
}

_COLORS: dict[RiskLevel, str] = {
    RiskLevel.LOW: "risk-low",
    RiskLevel.MEDIUM: "risk-medium",
    RiskLevel.HIGH: "risk-high",
    RiskLevel.CRITICAL: "risk-critical",
}

CHART_PALETTE: tuple[str, ...] = (
    "risk-high",
    "risk-medium",
    "risk-low",
    "primary",
)

_CATEGORY_SUFFIX = " Risk"

HIGH_RISK_LEVELS = frozenset({RiskLevel.HIGH, RiskLevel.CRITICAL})


def clamp_score(score: float) -> int:
    return int(max(_MIN_SCORE, min(_MAX_SCORE, score)))


def bucket(score: float) -> RiskLevel:
    """Map a 0-100 score to its risk level.

    Scores outside 0-100 are clamped rather than rejected.
    """
    clamped = clamp_score(score)
    for upper, level in _THRESHOLDS:
        if clamped <= upper:
            return level
    return RiskLevel.CRITICAL


def risk_label(level: RiskLevel) -> str:
    return _LABELS[level]


def risk_color(level: RiskLevel) -> str:
    return _COLORS[level]


def category_display_name(name: str) -> str:
    if name.endswith(_CATEGORY_SUFFIX):
        return name[: -len(_CATEGORY_SUFFIX)]
    return name


def aggregate_category_series(risk_categories: Mapping[str, int]) -> list[CategoryPoint]:
    """Build the category chart series in the mapping's insertion order."""
    return [
        CategoryPoint(
            name=category_display_name(name),
            value=value,
            color=CHART_PALETTE[index % len(CHART_PALETTE)],
        )
        for index, (name, value) in enumerate(risk_categories.items())
    ]
