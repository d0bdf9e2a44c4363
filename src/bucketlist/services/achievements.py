"""
Achievement rules for the bucket list tracker.

Achievements are data: each rule names an ActivityStats metric and the
threshold it has to reach. New achievements are added by registering
another rule, the evaluation stays the same.

Classes:
    AchievementRule: One threshold rule
    AchievementRegistry: Ordered collection of rules

Functions:
    achievements: Evaluate a registry against computed statistics
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models.stats import AchievementStatus, ActivityStats


@dataclass(frozen=True)
class AchievementRule:
    code: str
    title: str
    description: str
    icon: str
    metric: str
    threshold: int

    def value(self, stats: ActivityStats) -> float:
        return float(getattr(stats, self.metric))

    def evaluate(self, stats: ActivityStats) -> AchievementStatus:
        value = self.value(stats)
        achieved = value >= self.threshold
        if self.threshold <= 0:
            ratio = 1.0
        else:
            ratio = min(1.0, max(0.0, value / self.threshold))
        return AchievementStatus(
            code=self.code,
            title=self.title,
            description=self.description,
            icon=self.icon,
            achieved=achieved,
            progress=ratio,
        )


class AchievementRegistry:
    def __init__(self, rules: Iterable[AchievementRule] = ()) -> None:
        self._rules: List[AchievementRule] = []
        for rule in rules:
            self.register(rule)

    def register(self, rule: AchievementRule) -> None:
        if rule.metric not in ActivityStats.model_fields:
            raise ValueError(f"Unknown statistics metric {rule.metric!r}")
        # Avoid duplicates by code
        if not any(r.code == rule.code for r in self._rules):
            self._rules.append(rule)

    def all(self) -> List[AchievementRule]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


DEFAULT_ACHIEVEMENTS = (
    AchievementRule(
        code="first_completion",
        title="Getting Started",
        description="Complete your first activity",
        icon="🎯",
        metric="completed",
        threshold=1,
    ),
    AchievementRule(
        code="memory_keeper",
        title="Memory Keeper",
        description="Add photos to 5 activities",
        icon="📸",
        metric="with_photos",
        threshold=5,
    ),
    AchievementRule(
        code="on_fire",
        title="On Fire!",
        description="3-day completion streak",
        icon="🔥",
        metric="streak",
        threshold=3,
    ),
    AchievementRule(
        code="summer_champion",
        title="Summer Champion",
        description="Complete 10 activities",
        icon="🏆",
        metric="completed",
        threshold=10,
    ),
)

registry = AchievementRegistry(DEFAULT_ACHIEVEMENTS)


def achievements(
    stats: ActivityStats, rules: Optional[AchievementRegistry] = None
) -> List[AchievementStatus]:
    """Evaluate every rule, in registration order, against ``stats``."""
    rules = rules if rules is not None else registry
    return [rule.evaluate(stats) for rule in rules.all()]
