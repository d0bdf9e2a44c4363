"""
Unit tests for achievement rules and the registry.
"""

import pytest

from bucketlist.models.stats import ActivityStats
from bucketlist.services.achievements import (
    DEFAULT_ACHIEVEMENTS,
    AchievementRegistry,
    AchievementRule,
    achievements,
)
from bucketlist.services.statistics import summarize


def _by_code(statuses):
    return {status.code: status for status in statuses}


class TestDefaultAchievements:
    def test_nothing_achieved_for_empty_stats(self):
        statuses = achievements(ActivityStats())

        assert [s.code for s in statuses] == [
            "first_completion",
            "memory_keeper",
            "on_fire",
            "summer_champion",
        ]
        assert not any(s.achieved for s in statuses)
        assert all(s.progress == 0 for s in statuses)

    def test_first_completion(self):
        statuses = _by_code(achievements(ActivityStats(total=1, completed=1)))

        assert statuses["first_completion"].achieved
        assert statuses["first_completion"].icon == "🎯"
        assert statuses["summer_champion"].progress == pytest.approx(0.1)

    def test_progress_is_clamped(self):
        statuses = _by_code(achievements(ActivityStats(total=12, completed=12, with_photos=9)))

        assert statuses["summer_champion"].achieved
        assert statuses["summer_champion"].progress == 1.0
        assert statuses["memory_keeper"].progress == 1.0

    def test_streak_achievement_from_activities(self, make_activity):
        collection = [
            make_activity(completed_on="2025-06-01"),
            make_activity(completed_on="2025-06-02"),
            make_activity(completed_on="2025-06-03"),
        ]

        statuses = _by_code(achievements(summarize(collection)))

        assert statuses["on_fire"].achieved
        assert statuses["on_fire"].title == "On Fire!"


class TestAchievementRegistry:
    def test_register_ignores_duplicate_codes(self):
        registry = AchievementRegistry(DEFAULT_ACHIEVEMENTS)
        registry.register(DEFAULT_ACHIEVEMENTS[0])

        assert len(registry) == len(DEFAULT_ACHIEVEMENTS)

    def test_register_rejects_unknown_metric(self):
        registry = AchievementRegistry()

        with pytest.raises(ValueError):
            registry.register(
                AchievementRule(
                    code="globetrotter",
                    title="Globetrotter",
                    description="Visit 5 countries",
                    icon="🌍",
                    metric="countries",
                    threshold=5,
                )
            )

    def test_custom_registry(self):
        registry = AchievementRegistry(
            [
                AchievementRule(
                    code="explorer",
                    title="Explorer",
                    description="Tag 3 activities with a location",
                    icon="🧭",
                    metric="with_locations",
                    threshold=3,
                )
            ]
        )

        statuses = achievements(ActivityStats(with_locations=2), rules=registry)

        assert len(statuses) == 1
        assert not statuses[0].achieved
        assert statuses[0].progress == pytest.approx(2 / 3)
