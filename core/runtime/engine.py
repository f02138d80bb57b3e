"""
Engine binding facade.

SchemeEngine turns domain operations into driver calls and normalizes the
raw statuses into Ok/Err results.
"""
from typing import List

from core.errors import FatalIO
from core.runtime.drivers import SUCCESS, EngineDriver
from core.runtime.models import LearnStatus, SchemeDetails, Token, TokenType, Word
from core.runtime.options import EngineOption
from core.runtime.result import EngineError, Err, ErrorKind, Ok, Result


class SchemeEngine:
    """
    Typed interface over one engine handle.

    Handles:
    - The init-first contract (calls on a closed engine never reach the driver)
    - Eager capture of the engine's last error message
    - Copying engine-owned arrays into Token and Word values
    """

    def __init__(self, driver: EngineDriver):
        self.driver = driver
        self.handle = None
        self.scheme_file = None

    def init_engine(self, scheme_file):
        """Open `scheme_file` in the engine. Raises FatalIO on failure."""
        status, handle, message = self.driver.init(scheme_file)
        if status != SUCCESS:
            raise FatalIO(message or f"Engine failed to initialize (status {status})", path=scheme_file)
        self.handle = handle
        self.scheme_file = scheme_file
        return self

    @property
    def initialized(self) -> bool:
        return self.handle is not None

    def close(self):
        if self.handle is not None:
            self.driver.destroy(self.handle)
            self.handle = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Status translation
    # ------------------------------------------------------------------
    def _not_initialized(self, operation):
        return Err(EngineError(
            kind=ErrorKind.FATAL_IO,
            message="Engine is not initialized, call init_engine() first",
            operation=operation,
        ))

    def _rejected(self, operation, status):
        # The last error is only valid until the next engine call
        return Err(EngineError(
            kind=ErrorKind.ENGINE_REJECTED,
            code=status,
            message=self.driver.get_last_error(self.handle) or "unknown engine error",
            operation=operation,
        ))

    def _call(self, operation, function, *args) -> Result:
        if self.handle is None:
            return self._not_initialized(operation)
        status = function(self.handle, *args)
        if status != SUCCESS:
            return self._rejected(operation, status)
        return Ok()

    # ------------------------------------------------------------------
    # Scheme construction
    # ------------------------------------------------------------------
    def set_scheme_details(self, details: SchemeDetails) -> Result:
        return self._call(
            "set_scheme_details", self.driver.set_scheme_details,
            details.language_code, details.identifier, details.display_name,
            details.author, details.compiled_date,
        )

    def create_token(self, token: Token, buffered=True) -> Result:
        return self._call(
            "create_token", self.driver.create_token,
            token.pattern, token.value1, token.value2, token.value3, token.tag,
            int(token.type), int(token.match_type), 1 if buffered else 0,
        )

    def generate_combinations(self) -> Result:
        return self._call("generate_combinations", self.driver.generate_cv_combinations)

    def configure(self, option: EngineOption) -> Result:
        return self._call("configure", self.driver.config, int(option.option_id), *option.engine_values())

    def flush(self) -> Result:
        return self._call("flush", self.driver.flush_buffer)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def query_tokens(self, token_type: TokenType) -> Result:
        """
        Fetch every token of `token_type`.

        Returns Ok(iterator of Token). Every element is copied out of the
        engine array before returning, since the engine reuses the array on
        its next call. The iterator is single-pass.
        """
        if self.handle is None:
            return self._not_initialized("query_tokens")
        status, array = self.driver.get_all_tokens(self.handle, int(token_type))
        if status != SUCCESS:
            return self._rejected("query_tokens", status)
        return Ok(iter(self._read_tokens(array)))

    def _read_tokens(self, array) -> List[Token]:
        length = self.driver.array_length(array)
        return [Token.model_validate(self.driver.array_get_token(array, index)) for index in range(length)]

    def transliterate(self, text) -> Result:
        """Returns Ok(iterator of Word), read the same way as query_tokens()."""
        if self.handle is None:
            return self._not_initialized("transliterate")
        status, array = self.driver.transliterate(self.handle, text)
        if status != SUCCESS:
            return self._rejected("transliterate", status)
        return Ok(iter(self._read_words(array)))

    def _read_words(self, array) -> List[Word]:
        length = self.driver.array_length(array)
        return [Word.model_validate(self.driver.array_get_word(array, index)) for index in range(length)]

    def reverse_transliterate(self, text) -> Result:
        if self.handle is None:
            return self._not_initialized("reverse_transliterate")
        status, output = self.driver.reverse_transliterate(self.handle, text)
        if status != SUCCESS:
            return self._rejected("reverse_transliterate", status)
        return Ok(output)

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------
    def learn(self, word) -> Result:
        return self._call("learn", self.driver.learn, word)

    def learn_from_file(self, path, session=None) -> Result:
        """
        Teach the engine every word in `path`.

        A word the engine refuses does not stop the batch; it is reported as
        a warning on `session` when one is given.
        """
        if self.handle is None:
            return self._not_initialized("learn_from_file")

        def on_word(word, status):
            if status != SUCCESS and session is not None:
                session.record_warning(f"Failed to learn '{word}' (status {status})", location=path)

        status, total, failed = self.driver.learn_from_file(self.handle, path, on_word)
        if status != SUCCESS:
            return self._rejected("learn_from_file", status)
        if session is not None and failed:
            session.record_warning(f"{failed} of {total} words could not be learned", location=path)
        return Ok(LearnStatus(total_words=total, failed=failed))


def open_engine(scheme_file, driver: EngineDriver) -> SchemeEngine:
    """Create a SchemeEngine over `driver` and initialize it with `scheme_file`."""
    return SchemeEngine(driver).init_engine(scheme_file)
