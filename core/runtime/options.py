"""
Typed engine configuration options.

Each option knows its engine id and the positional values the engine's
variadic config entry point expects, so callers never pass untyped varargs.
"""
from enum import IntEnum
from typing import ClassVar, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ConfigOption(IntEnum):
    USE_DEAD_CONSONANTS = 100
    IGNORE_DUPLICATE_TOKEN = 101
    ENABLE_SUGGESTIONS = 102


class EngineOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    option_id: ClassVar[ConfigOption]

    def engine_values(self) -> Tuple:
        raise NotImplementedError


class UseDeadConsonants(EngineOption):
    option_id: ClassVar[ConfigOption] = ConfigOption.USE_DEAD_CONSONANTS
    enabled: bool = True

    def engine_values(self) -> Tuple:
        return (int(self.enabled),)


class IgnoreDuplicateToken(EngineOption):
    option_id: ClassVar[ConfigOption] = ConfigOption.IGNORE_DUPLICATE_TOKEN
    enabled: bool = True

    def engine_values(self) -> Tuple:
        return (int(self.enabled),)


class EnableSuggestions(EngineOption):
    """Points the engine at the file it stores learned words in."""
    option_id: ClassVar[ConfigOption] = ConfigOption.ENABLE_SUGGESTIONS
    path: str = Field(min_length=1)

    def engine_values(self) -> Tuple:
        return (self.path,)


# Names accepted by `set <name> <value>;` in scheme sources
OPTION_NAMES = {
    "use_dead_consonants": UseDeadConsonants,
    "ignore_duplicate_tokens": IgnoreDuplicateToken,
    "suggestions": EnableSuggestions,
}


def build_option(name, value):
    """Create the option registered under `name`; raises KeyError or ValueError."""
    option_cls = OPTION_NAMES[name]
    if option_cls is EnableSuggestions:
        if not isinstance(value, str):
            raise ValueError("expects a file path string")
        return EnableSuggestions(path=value)
    if not isinstance(value, bool):
        raise ValueError("expects true or false")
    return option_cls(enabled=value)
