"""
Tests for push predicates.
"""

import pytest

from pushline.core.predicates import (
    AllOf,
    Always,
    HasFile,
    Not,
    and_,
    always,
    describe,
    evaluate,
    has_file,
    has_file_with_extension,
    not_,
    or_,
    parse_predicate,
)
from pushline.errors import ConfigurationError
from pushline.models.push import ProjectSnapshot


@pytest.fixture
def snapshot():
    return ProjectSnapshot.from_paths({"pom.xml", "src/App.csproj", "README.md"})


class TestLeaves:
    """Tests for leaf predicates."""

    def test_has_file_exact_path(self, snapshot):
        assert evaluate(has_file("pom.xml"), snapshot)
        assert not evaluate(has_file("build.gradle"), snapshot)

    def test_has_file_does_not_match_nested_name(self, snapshot):
        assert not evaluate(has_file("App.csproj"), snapshot)

    def test_has_file_with_extension(self, snapshot):
        assert evaluate(has_file_with_extension("csproj"), snapshot)
        assert evaluate(has_file_with_extension(".csproj"), snapshot)
        assert not evaluate(has_file_with_extension("sln"), snapshot)

    def test_always(self, snapshot):
        assert evaluate(always(), snapshot)
        assert evaluate(always(), ProjectSnapshot())


class TestCombinators:
    """Tests for and/or/not."""

    def test_not(self, snapshot):
        assert not evaluate(not_(has_file("pom.xml")), snapshot)
        assert evaluate(not_(has_file("pom.xml")), ProjectSnapshot())

    def test_and(self, snapshot):
        assert evaluate(and_(has_file("pom.xml"), has_file("README.md")), snapshot)
        assert not evaluate(and_(has_file("pom.xml"), has_file("missing")), snapshot)

    def test_or(self, snapshot):
        assert evaluate(or_(has_file("missing"), has_file("pom.xml")), snapshot)
        assert not evaluate(or_(has_file("missing"), has_file("other")), ProjectSnapshot())

    def test_and_short_circuits(self):
        calls = []

        class CountingSnapshot(ProjectSnapshot):
            def has_file(self, name):
                calls.append(name)
                return super().has_file(name)

        snap = CountingSnapshot(paths=frozenset({"a"}))
        assert not evaluate(and_(has_file("missing"), has_file("a")), snap)
        assert calls == ["missing"]

    def test_or_short_circuits(self):
        calls = []

        class CountingSnapshot(ProjectSnapshot):
            def has_file(self, name):
                calls.append(name)
                return super().has_file(name)

        snap = CountingSnapshot(paths=frozenset({"a"}))
        assert evaluate(or_(has_file("a"), has_file("b")), snap)
        assert calls == ["a"]

    def test_evaluation_is_deterministic(self, snapshot):
        test = or_(not_(has_file("pom.xml")), has_file_with_extension("csproj"))
        assert {evaluate(test, snapshot) for _ in range(5)} == {True}


class TestParsePredicate:
    """Tests for the compact YAML form."""

    def test_none_is_always(self):
        assert isinstance(parse_predicate(None), Always)
        assert isinstance(parse_predicate("always"), Always)

    def test_nested(self):
        predicate = parse_predicate({
            "and": [
                {"has_file": "pom.xml"},
                {"not": {"has_file_with_extension": "csproj"}},
            ]
        })
        assert isinstance(predicate, AllOf)
        assert isinstance(predicate.predicates[0], HasFile)
        assert isinstance(predicate.predicates[1], Not)

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError):
            parse_predicate({"has_directory": "src"})

    def test_empty_list(self):
        with pytest.raises(ConfigurationError):
            parse_predicate({"or": []})

    def test_bad_file_name(self):
        with pytest.raises(ConfigurationError):
            parse_predicate({"has_file": ["pom.xml"]})

    def test_describe(self):
        predicate = parse_predicate({"not": {"has_file": "pom.xml"}})
        assert describe(predicate) == "not hasFile(pom.xml)"
