"""
Command registration.

Generators that scaffold new projects run outside the scheduling core.
This registry is only where they are declared and looked up by intent.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

from pushline.errors import ConfigurationError
from pushline.models.push import RepoRef

GeneratorHandler = Callable[[dict[str, Any]], Awaitable[None]]


class GeneratorRegistration(BaseModel):
    """A project generator reachable through a command intent."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(description="Unique registration name")
    intent: str = Field(description="Phrase that triggers the generator")
    description: str = Field(default="")
    tags: tuple[str, ...] = Field(default=())
    auto_submit: bool = Field(default=False, description="Submit without asking for parameters")
    starting_point: RepoRef | None = Field(default=None, description="Seed repository")
    handler: GeneratorHandler | None = Field(default=None, exclude=True)


class CommandRegistry:
    """
    Registry of command intents.

    Example:
        >>> registry = CommandRegistry()
        >>> registry.register(MAVEN_GENERATOR)
        >>> registry.find_by_intent("create maven project")
    """

    def __init__(self):
        self._commands: dict[str, GeneratorRegistration] = {}

    def register(self, registration: GeneratorRegistration) -> None:
        """
        Register a command.

        Raises:
            ConfigurationError: If the name or intent is already taken
        """
        if registration.name in self._commands:
            raise ConfigurationError(f"Command already registered: {registration.name}", "name")
        if self.find_by_intent(registration.intent):
            raise ConfigurationError(f"Intent already registered: {registration.intent}", "intent")
        self._commands[registration.name] = registration

    def get(self, name: str) -> GeneratorRegistration | None:
        return self._commands.get(name)

    def find_by_intent(self, intent: str) -> GeneratorRegistration | None:
        """Find a command by its intent, ignoring case and surrounding whitespace."""
        wanted = intent.strip().lower()
        for registration in self._commands.values():
            if registration.intent.lower() == wanted:
                return registration
        return None

    def get_all(self) -> list[GeneratorRegistration]:
        return list(self._commands.values())

    async def invoke(self, intent: str, parameters: dict[str, Any] | None = None) -> None:
        """
        Hand an intent to its generator.

        Raises:
            ConfigurationError: If no generator handles the intent
        """
        registration = self.find_by_intent(intent)
        if registration is None:
            raise ConfigurationError(f"No command registered for intent: {intent}", "intent")
        if registration.handler is None:
            raise ConfigurationError(
                f"Command '{registration.name}' has no generator attached", "handler"
            )
        await registration.handler(parameters or {})

    def __len__(self) -> int:
        return len(self._commands)
