"""
Goal set resolution.

Matches the rule table against a push and produces the goal sets to run,
ordered by declared dependency. The rule table is validated once when it
is built so broken wiring fails at startup rather than on a push.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from pushline.core.predicates import Always, Predicate, evaluate
from pushline.errors import ConfigurationError
from pushline.models.goals import Goal, GoalSet
from pushline.models.push import PushEvent
from pushline.utils.logger import get_logger

logger = get_logger("pushline.resolver")


@dataclass(frozen=True)
class PushRule:
    """
    A rule mapping a push predicate to a set of goals.

    Example:
        >>> PushRule(name="build", test=has_file("pom.xml"), goals=(build_goal,))
    """

    name: str
    test: Predicate = field(default_factory=Always)
    goals: tuple[Goal, ...] = ()
    depends_on: str | None = None
    lock: bool = False


class RuleMatch(str, Enum):
    """Outcome of evaluating one rule against a push."""

    NOT_MATCHED = "not_matched"
    MATCHED_OPEN = "matched_open"
    MATCHED_LOCKED = "matched_locked"


def match_rule(rule: PushRule, push: PushEvent) -> RuleMatch:
    """Classify a rule against a push."""
    if not evaluate(rule.test, push.snapshot):
        return RuleMatch.NOT_MATCHED
    return RuleMatch.MATCHED_LOCKED if rule.lock else RuleMatch.MATCHED_OPEN


class RuleTable:
    """
    Immutable, validated table of push rules.

    Built once at startup and shared read-only by every push.

    Raises:
        ConfigurationError: On duplicate names, unknown dependencies, cycles
            or locked rules that declare a dependency
    """

    def __init__(self, rules: Iterable[PushRule]):
        self._rules: tuple[PushRule, ...] = tuple(rules)
        self._by_name: dict[str, PushRule] = {}
        self._dependents: dict[str, tuple[str, ...]] = {}

        for rule in self._rules:
            if rule.name in self._by_name:
                raise ConfigurationError(f"Duplicate rule name: {rule.name}", "name")
            self._by_name[rule.name] = rule

        for rule in self._rules:
            if rule.depends_on is None:
                continue
            if rule.lock:
                # A locked match is resolved alone, so its dependency never runs
                raise ConfigurationError(
                    f"Rule '{rule.name}' is locked and cannot depend on '{rule.depends_on}'",
                    "lock",
                )
            if rule.depends_on not in self._by_name:
                raise ConfigurationError(
                    f"Rule '{rule.name}' depends on undefined rule: {rule.depends_on}",
                    "depends_on",
                )

        self._check_cycles()

        dependents: dict[str, list[str]] = {name: [] for name in self._by_name}
        for rule in self._rules:
            if rule.depends_on:
                dependents[rule.depends_on].append(rule.name)
        self._dependents = {name: tuple(names) for name, names in dependents.items()}

    def _check_cycles(self) -> None:
        for rule in self._rules:
            seen = {rule.name}
            current = rule.depends_on
            while current is not None:
                if current in seen:
                    raise ConfigurationError(
                        f"Dependency cycle involving rule '{rule.name}'", "depends_on"
                    )
                seen.add(current)
                current = self._by_name[current].depends_on

    @property
    def rules(self) -> tuple[PushRule, ...]:
        return self._rules

    def get(self, name: str) -> PushRule | None:
        return self._by_name.get(name)

    def dependents_of(self, name: str) -> tuple[str, ...]:
        """Names of the rules that directly depend on a rule."""
        return self._dependents.get(name, ())

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


@dataclass(frozen=True)
class ResolvedGoalSet:
    """A matched rule paired with the goal set created for this push."""

    rule: PushRule
    goal_set: GoalSet


@dataclass(frozen=True)
class Resolution:
    """Ordered goal sets for one push."""

    entries: tuple[ResolvedGoalSet, ...] = ()
    locked: bool = False
    matches: dict[str, RuleMatch] = field(default_factory=dict)

    @property
    def rule_names(self) -> list[str]:
        return [e.rule.name for e in self.entries]

    @property
    def goals(self) -> list[Goal]:
        return [g for e in self.entries for g in e.goal_set.goals]

    def __len__(self) -> int:
        return len(self.entries)


def resolve(table: RuleTable, push: PushEvent) -> Resolution:
    """
    Resolve the goal sets for a push.

    Rules are evaluated in declaration order. The first locked match ends
    evaluation and is the only goal set for the push. Otherwise matched
    rules whose dependency is not itself scheduled are dropped, and the
    rest are ordered so that every rule follows the rule it depends on,
    falling back to declaration order.

    Args:
        table: Validated rule table
        push: Incoming push

    Returns:
        Resolution with a fresh GoalSet per matched rule
    """
    matches: dict[str, RuleMatch] = {}

    for rule in table:
        outcome = match_rule(rule, push)
        matches[rule.name] = outcome
        if outcome == RuleMatch.MATCHED_LOCKED:
            logger.info(f"Rule [bold]{rule.name}[/] locked goals for {push.short_sha}")
            return Resolution(
                entries=(ResolvedGoalSet(rule, _goal_set_for(rule)),),
                locked=True,
                matches=matches,
            )

    matched = [r for r in table if matches[r.name] == RuleMatch.MATCHED_OPEN]
    scheduled = _drop_unsatisfied(matched, table)
    ordered = _topological_order(scheduled)

    return Resolution(
        entries=tuple(ResolvedGoalSet(r, _goal_set_for(r)) for r in ordered),
        locked=False,
        matches=matches,
    )


def _goal_set_for(rule: PushRule) -> GoalSet:
    return GoalSet(rule=rule.name, goals=tuple(rule.goals))


def _drop_unsatisfied(matched: list[PushRule], table: RuleTable) -> list[PushRule]:
    """Remove rules whose dependency chain did not fully match."""
    names = {r.name for r in matched}
    kept: list[PushRule] = []

    for rule in matched:
        current = rule.depends_on
        while current is not None and current in names:
            current = table.get(current).depends_on
        if current is None:
            kept.append(rule)
        else:
            logger.warning(
                f"Rule [bold]{rule.name}[/] matched but its dependency "
                f"'{current}' did not; dropping it for this push"
            )

    return kept


def _topological_order(rules: list[PushRule]) -> list[PushRule]:
    """Kahn's algorithm with declaration order as the tie-break."""
    pending = list(rules)
    done: set[str] = set()
    ordered: list[PushRule] = []

    while pending:
        for rule in pending:
            if rule.depends_on is None or rule.depends_on in done:
                break
        else:
            # Unreachable for a validated table with unsatisfied rules dropped
            raise ConfigurationError("Unresolvable rule dependencies", "depends_on")
        pending.remove(rule)
        done.add(rule.name)
        ordered.append(rule)

    return ordered
