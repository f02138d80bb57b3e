"""
Compilation session: diagnostics and in-flight token state for one scheme.
"""
from contextlib import contextmanager
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from core.runtime.models import Token
from core.runtime.result import EngineError, Err, ErrorKind, Ok
from core.runtime.sink import Severity, format_message


def _describe_validation(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "token"
        problems.append(f"{field}: {item['msg']}")
    return "; ".join(problems)


class CompilationSession:
    """
    State for one compilation run.

    Sessions are independent objects, so tests and callers can run several
    compilations in one process. Counters and message lists only grow.
    """

    def __init__(self):
        self._errors = 0
        self._warnings = 0
        self.tokens: Dict[Tuple[str, str], Token] = {}
        self.current_expression: Optional[str] = None
        self.current_location: Optional[str] = None
        self.current_tag: Optional[str] = None
        self.error_messages: List[str] = []
        self.warning_messages: List[str] = []

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def record_error(self, message, location=None):
        self.error_messages.append(self._format(Severity.ERROR, message, location))
        self._errors += 1

    def record_warning(self, message, location=None):
        self.warning_messages.append(self._format(Severity.WARNING, message, location))
        self._warnings += 1

    def _format(self, severity, message, location):
        return format_message(
            severity,
            str(message),
            expression=self.current_expression,
            location=location or self.current_location,
        )

    def error_count(self) -> int:
        return self._errors

    def warning_count(self) -> int:
        return self._warnings

    def succeeded(self) -> bool:
        return self._errors == 0

    # ------------------------------------------------------------------
    # Cursors
    # ------------------------------------------------------------------
    def set_current_expression(self, expression, location=None):
        self.current_expression = expression
        self.current_location = location

    def clear_current_expression(self):
        self.current_expression = None
        self.current_location = None

    @contextmanager
    def expression(self, expression, location=None):
        """Attribute diagnostics to `expression` until the block exits."""
        self.set_current_expression(expression, location)
        try:
            yield self
        finally:
            self.clear_current_expression()

    def set_current_tag(self, tag):
        self.current_tag = tag

    def clear_current_tag(self):
        self.current_tag = None

    @contextmanager
    def tag(self, tag):
        self.set_current_tag(tag)
        try:
            yield self
        finally:
            self.clear_current_tag()

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------
    def register_token(self, token):
        """
        Validate a token locally and keep it for the rest of the run.

        Args:
            token: a Token, or a mapping of Token fields. A mapping without a
                tag inherits `current_tag`.

        Returns:
            Ok(Token) when the token is valid, Err(EngineError) after
            recording one error otherwise. Nothing is sent to the engine.
        """
        if not isinstance(token, Token):
            if not isinstance(token, Mapping):
                return self._invalid(f"Invalid token: expected token fields, got {type(token).__name__}")
            fields = dict(token)
            if not fields.get("tag") and self.current_tag:
                fields["tag"] = self.current_tag
            try:
                token = Token.model_validate(fields)
            except ValidationError as e:
                pattern = fields.get("pattern") or ""
                return self._invalid(f"Invalid token '{pattern}': {_describe_validation(e)}")

        # A repeated (pattern, tag) replaces the earlier entry; the engine
        # decides whether the duplicate is acceptable.
        self.tokens[token.key] = token
        return Ok(token)

    def _invalid(self, message):
        self.record_error(message)
        return Err(EngineError(
            kind=ErrorKind.VALIDATION_ERROR,
            message=message,
            operation="register_token",
        ))
