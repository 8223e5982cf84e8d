"""
Push predicates.

Predicates are a small tagged expression tree over a project snapshot:
leaf tests (file exists, file extension exists, always) combined with
conjunction, disjunction and negation. Evaluation never performs I/O
beyond the paths already held by the snapshot.

Example:
    >>> test = not_(has_file("pom.xml"))
    >>> evaluate(test, ProjectSnapshot.from_paths({"README.md"}))
    True
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from pushline.errors import ConfigurationError
from pushline.models.push import ProjectSnapshot


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class Always(_Node):
    """Matches every push."""

    kind: Literal["always"] = "always"


class HasFile(_Node):
    """True iff the snapshot contains a file with exactly this path."""

    kind: Literal["has_file"] = "has_file"
    name: str = Field(min_length=1)


class HasFileWithExtension(_Node):
    """True iff any file in the snapshot ends with the extension."""

    kind: Literal["has_file_with_extension"] = "has_file_with_extension"
    extension: str = Field(min_length=1)


class AllOf(_Node):
    """Conjunction; stops at the first false child."""

    kind: Literal["and"] = "and"
    predicates: tuple[Predicate, ...]


class AnyOf(_Node):
    """Disjunction; stops at the first true child."""

    kind: Literal["or"] = "or"
    predicates: tuple[Predicate, ...]


class Not(_Node):
    """Negation of a single child."""

    kind: Literal["not"] = "not"
    predicate: Predicate


Predicate = Annotated[
    Union[Always, HasFile, HasFileWithExtension, AllOf, AnyOf, Not],
    Field(discriminator="kind"),
]

AllOf.model_rebuild()
AnyOf.model_rebuild()
Not.model_rebuild()


def always() -> Always:
    return Always()


def has_file(name: str) -> HasFile:
    return HasFile(name=name)


def has_file_with_extension(extension: str) -> HasFileWithExtension:
    return HasFileWithExtension(extension=extension)


def and_(*predicates: Predicate) -> AllOf:
    return AllOf(predicates=predicates)


def or_(*predicates: Predicate) -> AnyOf:
    return AnyOf(predicates=predicates)


def not_(predicate: Predicate) -> Not:
    return Not(predicate=predicate)


def evaluate(predicate: Predicate, snapshot: ProjectSnapshot) -> bool:
    """
    Evaluate a predicate against a snapshot.

    Args:
        predicate: Predicate tree
        snapshot: Files of the pushed commit

    Returns:
        Whether the push satisfies the predicate
    """
    if isinstance(predicate, Always):
        return True
    if isinstance(predicate, HasFile):
        return snapshot.has_file(predicate.name)
    if isinstance(predicate, HasFileWithExtension):
        return snapshot.has_file_with_extension(predicate.extension)
    if isinstance(predicate, AllOf):
        return all(evaluate(p, snapshot) for p in predicate.predicates)
    if isinstance(predicate, AnyOf):
        return any(evaluate(p, snapshot) for p in predicate.predicates)
    if isinstance(predicate, Not):
        return not evaluate(predicate.predicate, snapshot)
    raise TypeError(f"Unknown predicate type: {type(predicate).__name__}")


def describe(predicate: Predicate) -> str:
    """Render a predicate as a readable expression."""
    if isinstance(predicate, Always):
        return "always"
    if isinstance(predicate, HasFile):
        return f"hasFile({predicate.name})"
    if isinstance(predicate, HasFileWithExtension):
        return f"hasFileWithExtension({predicate.extension})"
    if isinstance(predicate, AllOf):
        return "(" + " and ".join(describe(p) for p in predicate.predicates) + ")"
    if isinstance(predicate, AnyOf):
        return "(" + " or ".join(describe(p) for p in predicate.predicates) + ")"
    if isinstance(predicate, Not):
        return f"not {describe(predicate.predicate)}"
    raise TypeError(f"Unknown predicate type: {type(predicate).__name__}")


def parse_predicate(data: Any) -> Predicate:
    """
    Build a predicate from its compact YAML form.

    Supported forms:
        - "always"
        - {has_file: pom.xml}
        - {has_file_with_extension: csproj}
        - {not: <predicate>}
        - {and: [<predicate>, ...]}
        - {or: [<predicate>, ...]}

    Raises:
        ConfigurationError: If the data is not a valid predicate
    """
    if data is None or data == "always":
        return Always()

    if not isinstance(data, dict) or len(data) != 1:
        raise ConfigurationError(f"Invalid predicate: {data!r}", "test")

    key, value = next(iter(data.items()))

    if key == "has_file":
        return HasFile(name=_require_string(key, value))
    if key == "has_file_with_extension":
        return HasFileWithExtension(extension=_require_string(key, value))
    if key == "not":
        return Not(predicate=parse_predicate(value))
    if key in ("and", "or"):
        if not isinstance(value, list) or not value:
            raise ConfigurationError(f"'{key}' expects a non-empty list of predicates", "test")
        children = tuple(parse_predicate(v) for v in value)
        return AllOf(predicates=children) if key == "and" else AnyOf(predicates=children)

    raise ConfigurationError(f"Unknown predicate: {key}", "test")


def _require_string(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"'{key}' expects a file name, got {value!r}", "test")
    return value
