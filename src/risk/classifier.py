"""
CrowdRisk - Ordered Threshold Classifier
Shared first-match-wins classification used by every risk evaluator.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence, TypeVar

L = TypeVar("L")


@dataclass(frozen=True)
class ThresholdRule:
    """
    One band of an ordered classification table.

    The rule matches when ANY metric in ``at_least`` reaches its minimum
    or ANY metric in ``below`` is strictly under its bound.
    """
    level: object
    at_least: Mapping[str, float] = field(default_factory=dict)
    below: Mapping[str, float] = field(default_factory=dict)

    def matches(self, metrics: Mapping[str, float]) -> bool:
        for name, minimum in self.at_least.items():
            if metrics[name] >= minimum:
                return True
        for name, bound in self.below.items():
            if metrics[name] < bound:
                return True
        return False


def classify(
    metrics: Dict[str, float],
    rules: Sequence[ThresholdRule],
    default: L
) -> L:
    """
    Return the level of the first matching rule, or the default.

    Args:
        metrics: Metric values keyed by name
        rules: Rules in priority order
        default: Level when no rule matches

    Returns:
        Matched level
    """
    for rule in rules:
        if rule.matches(metrics):
            return rule.level
    return default
