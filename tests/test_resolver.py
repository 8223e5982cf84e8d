"""
Tests for goal set resolution.
"""

import logging

import pytest

from pushline.core.predicates import has_file, not_
from pushline.core.resolver import PushRule, RuleMatch, RuleTable, match_rule, resolve
from pushline.errors import ConfigurationError
from pushline.models.goals import Goal, GoalResult


async def _noop(invocation):
    return GoalResult.success()


def goal(name: str) -> Goal:
    return Goal(name=name, display_name=name, action=_noop)


class TestRuleTable:
    """Tests for rule table validation."""

    def test_valid_table(self):
        table = RuleTable([
            PushRule(name="build", goals=(goal("build"),)),
            PushRule(name="run", depends_on="build", goals=(goal("run"),)),
        ])
        assert len(table) == 2
        assert "run" in table
        assert table.dependents_of("build") == ("run",)

    def test_unknown_dependency(self):
        with pytest.raises(ConfigurationError) as exc:
            RuleTable([PushRule(name="run", depends_on="build")])
        assert "build" in str(exc.value)
        assert exc.value.field == "depends_on"

    def test_duplicate_name(self):
        with pytest.raises(ConfigurationError):
            RuleTable([PushRule(name="build"), PushRule(name="build")])

    def test_cycle(self):
        with pytest.raises(ConfigurationError):
            RuleTable([
                PushRule(name="a", depends_on="b"),
                PushRule(name="b", depends_on="a"),
            ])

    def test_self_dependency(self):
        with pytest.raises(ConfigurationError):
            RuleTable([PushRule(name="a", depends_on="a")])

    def test_locked_rule_with_dependency(self):
        with pytest.raises(ConfigurationError) as exc:
            RuleTable([
                PushRule(name="build", goals=(goal("build"),)),
                PushRule(name="deploy", depends_on="build", lock=True, goals=(goal("deploy"),)),
            ])
        assert "deploy" in str(exc.value)
        assert exc.value.field == "lock"


class TestMatchRule:
    """Tests for tri-state rule matching."""

    def test_states(self, maven_push, plain_push):
        locked = PushRule(name="no_goals", test=not_(has_file("pom.xml")), lock=True)
        assert match_rule(locked, plain_push) == RuleMatch.MATCHED_LOCKED
        assert match_rule(locked, maven_push) == RuleMatch.NOT_MATCHED
        assert match_rule(PushRule(name="build"), maven_push) == RuleMatch.MATCHED_OPEN


class TestResolve:
    """Tests for resolve()."""

    @pytest.fixture
    def maven_table(self):
        return RuleTable([
            PushRule(name="no_goals", test=not_(has_file("pom.xml")), lock=True),
            PushRule(name="build", goals=(goal("maven-build"),)),
            PushRule(name="run", depends_on="build", goals=(goal("run"),)),
        ])

    def test_no_marker_file_is_locked_and_empty(self, maven_table, plain_push):
        resolution = resolve(maven_table, plain_push)
        assert resolution.locked
        assert resolution.rule_names == ["no_goals"]
        assert resolution.goals == []
        assert resolution.matches == {"no_goals": RuleMatch.MATCHED_LOCKED}

    def test_marker_file_schedules_build_then_run(self, maven_table, maven_push):
        resolution = resolve(maven_table, maven_push)
        assert not resolution.locked
        assert resolution.rule_names == ["build", "run"]
        assert [g.name for g in resolution.goals] == ["maven-build", "run"]
        assert resolution.matches["no_goals"] == RuleMatch.NOT_MATCHED

    def test_dependency_order_beats_declaration_order(self, maven_push):
        table = RuleTable([
            PushRule(name="run", depends_on="build"),
            PushRule(name="lint"),
            PushRule(name="build"),
        ])
        assert resolve(table, maven_push).rule_names == ["lint", "build", "run"]

    def test_independent_rules_keep_declaration_order(self, maven_push):
        table = RuleTable([PushRule(name=n) for n in ("c", "a", "b")])
        assert resolve(table, maven_push).rule_names == ["c", "a", "b"]

    def test_unmatched_dependency_drops_dependent(self, maven_push, caplog):
        table = RuleTable([
            PushRule(name="docker", test=has_file("Dockerfile")),
            PushRule(name="deploy", depends_on="docker"),
            PushRule(name="notify", depends_on="deploy"),
            PushRule(name="build"),
        ])
        with caplog.at_level(logging.WARNING, logger="pushline"):
            resolution = resolve(table, maven_push)

        assert resolution.rule_names == ["build"]
        assert "deploy" in caplog.text
        assert "notify" in caplog.text

    def test_lock_takes_precedence_over_other_matches(self, maven_push):
        table = RuleTable([
            PushRule(name="build", goals=(goal("build"),)),
            PushRule(name="skip", test=has_file("pom.xml"), lock=True),
            PushRule(name="run"),
        ])
        resolution = resolve(table, maven_push)
        assert resolution.locked
        assert resolution.rule_names == ["skip"]
        assert "run" not in resolution.matches

    def test_fresh_goal_set_per_push(self, maven_table, maven_push):
        first = resolve(maven_table, maven_push)
        second = resolve(maven_table, maven_push)
        assert first.entries[0].goal_set is not second.entries[0].goal_set
        assert first.entries[0].goal_set.goal_names == second.entries[0].goal_set.goal_names

    def test_nothing_matches(self, plain_push):
        table = RuleTable([PushRule(name="build", test=has_file("pom.xml"))])
        resolution = resolve(table, plain_push)
        assert len(resolution) == 0
        assert not resolution.locked
