"""
Rule loader for Pushline.

Loads push rule tables from YAML files. Goals are referred to by name
and looked up in a goal catalog supplied by the caller.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from pushline.core.predicates import parse_predicate
from pushline.core.resolver import PushRule, RuleTable
from pushline.errors import ConfigurationError
from pushline.models.goals import Goal


class RuleDefinition(BaseModel):
    """A single rule as written in a rule file."""

    name: str = Field(min_length=1, description="Unique rule name")
    description: str = Field(default="", description="What the rule is for")
    test: Any = Field(default=None, description="Predicate in compact form (None = always)")
    goals: list[str] = Field(default_factory=list, description="Goal names, in order")
    depends_on: str | None = Field(default=None, description="Rule that must succeed first")
    lock: bool = Field(default=False, description="Stop evaluating rules once matched")


class RuleFile(BaseModel):
    """A complete rule table definition."""

    name: str = Field(description="Rule table name")
    description: str = Field(default="", description="Rule table description")
    rules: list[RuleDefinition] = Field(default_factory=list)

    @field_validator("rules", mode="before")
    @classmethod
    def convert_rules(cls, v: Any) -> list[Any]:
        """Accept a mapping of name -> rule as well as a list."""
        if not v:
            return []
        if isinstance(v, dict):
            return [{"name": name, **(body or {})} for name, body in v.items()]
        return v


class RuleLoader:
    """
    Loads rule tables from YAML files.

    Example:
        >>> loader = RuleLoader(maven_goals(config))
        >>> table = loader.load("maven")
        >>> [rule.name for rule in table]
        ['no_goals', 'build', 'run']
    """

    def __init__(self, catalog: dict[str, Goal], rule_dirs: list[Path] | None = None):
        """
        Initialize the loader.

        Args:
            catalog: Goals available to rule files, keyed by name
            rule_dirs: Extra directories to search for rule files
        """
        self.catalog = catalog
        self.rule_dirs = [Path(__file__).parent / "builtin"]
        if rule_dirs:
            self.rule_dirs.extend(rule_dirs)

    def load(self, name: str) -> RuleTable:
        """
        Load a rule table by name.

        Raises:
            FileNotFoundError: If no rule file has this name
            ConfigurationError: If the rule table is invalid
        """
        for dir_path in self.rule_dirs:
            for suffix in (".yaml", ".yml"):
                path = dir_path / f"{name}{suffix}"
                if path.exists():
                    return self.load_file(path)

        raise FileNotFoundError(f"Rule table not found: {name}")

    def load_file(self, path: str | Path) -> RuleTable:
        """Load a rule table from a file path."""
        with open(path, "r", encoding="utf-8") as f:
            return self.build(self.parse(f.read()))

    def load_from_string(self, content: str) -> RuleTable:
        """Load a rule table from a YAML string."""
        return self.build(self.parse(content))

    def parse(self, content: str) -> RuleFile:
        """
        Parse YAML into a rule file without resolving goals.

        Raises:
            ConfigurationError: If the YAML or its structure is invalid
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid rule file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError("Rule file must be a mapping")

        try:
            return RuleFile.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid rule file: {e}") from e

    def build(self, rule_file: RuleFile) -> RuleTable:
        """
        Turn a parsed rule file into a validated rule table.

        Raises:
            ConfigurationError: On unknown goals, bad predicates or bad dependencies
        """
        rules = []
        for definition in rule_file.rules:
            goals = []
            for goal_name in definition.goals:
                goal = self.catalog.get(goal_name)
                if goal is None:
                    raise ConfigurationError(
                        f"Rule '{definition.name}' uses unknown goal: {goal_name}", "goals"
                    )
                goals.append(goal)

            rules.append(PushRule(
                name=definition.name,
                test=parse_predicate(definition.test),
                goals=tuple(goals),
                depends_on=definition.depends_on,
                lock=definition.lock,
            ))

        return RuleTable(rules)

    def list_available(self) -> list[str]:
        """List all rule table names found in the search directories."""
        tables = set()

        for dir_path in self.rule_dirs:
            if not dir_path.exists():
                continue
            for pattern in ("*.yaml", "*.yml"):
                for file_path in dir_path.glob(pattern):
                    tables.add(file_path.stem)

        return sorted(tables)

    def validate(self, content: str) -> list[str]:
        """
        Validate a rule file.

        Returns:
            List of validation errors (empty if valid)
        """
        try:
            rule_file = self.parse(content)
        except ConfigurationError as e:
            return [e.message]

        errors = []
        if not rule_file.rules:
            errors.append("Rule table must define at least one rule")

        try:
            self.build(rule_file)
        except ConfigurationError as e:
            errors.append(e.message)

        return errors
