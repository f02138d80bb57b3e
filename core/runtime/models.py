"""
Token model shared between the compiler and the engine boundary.

Every string a token carries ends up in a fixed-size engine buffer, so
lengths are checked on the UTF-8 encoded form when the model is built.
Over-length input is rejected, never truncated.
"""
from datetime import date
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

SYMBOL_MAX = 30


class TokenType(IntEnum):
    VOWEL = 1
    CONSONANT = 2
    DEAD_CONSONANT = 3
    CONSONANT_VOWEL = 4
    NUMBER = 5
    SYMBOL = 6
    ANUSVARA = 7
    VISARGA = 8
    VIRAMA = 9
    OTHER = 10
    NON_JOINER = 11


class MatchType(IntEnum):
    EXACT = 1
    POSSIBILITY = 2


def _check_symbol_length(value):
    size = len(value.encode("utf-8"))
    if size > SYMBOL_MAX:
        raise ValueError(f"'{value}' is {size} bytes long, the maximum is {SYMBOL_MAX}")
    return value


class Token(BaseModel):
    """One pattern to script mapping declared in a scheme."""
    model_config = ConfigDict(frozen=True)

    type: TokenType
    match_type: MatchType = MatchType.EXACT
    tag: str = ""
    pattern: str = Field(min_length=1)
    value1: str = Field(min_length=1)
    value2: str = ""
    value3: str = ""

    @field_validator("tag", "pattern", "value1", "value2", "value3")
    @classmethod
    def fits_symbol_buffer(cls, value):
        return _check_symbol_length(value)

    @property
    def key(self):
        """Key used by the compilation session to index registered tokens."""
        return (self.pattern, self.tag)


class Word(BaseModel):
    """A transliteration result produced by the engine."""
    model_config = ConfigDict(frozen=True)

    text: str
    confidence: int = Field(default=0, ge=0)


class SchemeDetails(BaseModel):
    """Metadata written into the compiled scheme."""
    language_code: str = Field(min_length=1)
    identifier: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    author: str = ""
    compiled_date: str = Field(default_factory=lambda: date.today().isoformat())


class LearnStatus(BaseModel):
    total_words: int = 0
    failed: int = 0
