"""
Health and recommendation taxonomy for unit-economics results.

Three closed vocabularies describe every calculation result:
  - ``HealthTier``           — coarse good/medium/bad summary of a metric.
  - ``RecommendationType``   — which advisory block a message belongs to.
  - ``RecommendationStatus`` — the tone the presentation layer should use.

Members are ``StrEnum`` so they serialize to (and compare equal with) the
plain lowercase strings stored by callers::

    from leansim.taxonomy.health_taxonomy import HealthTier

    assert HealthTier.GOOD == "good"

This module has NO imports from any other ``leansim`` package.
"""

from enum import StrEnum


class HealthTier(StrEnum):
    """Three-level health classification."""

    GOOD = "good"
    """Metric is within a healthy range."""

    MEDIUM = "medium"
    """Acceptable but improvable."""

    BAD = "bad"
    """Unsustainable; needs action."""


class RecommendationType(StrEnum):
    """Advisory block emitted by the recommendation generator, in output order."""

    VIABILITY = "viability"
    """Always present: profit / loss situation."""

    ACQUISITION = "acquisition"
    """Always present: LTV vs. CAC efficiency."""

    OPTIMIZATION = "optimization"
    """Only for healthy models or distant break-even points."""

    NEXT_STEPS = "next_steps"
    """Prioritized action list; only when at least one action applies."""


class RecommendationStatus(StrEnum):
    """Tone of a recommendation."""

    POSITIVE = "positive"
    WARNING = "warning"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
