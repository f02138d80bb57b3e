"""
Shared fixtures: an in-memory engine driver standing in for the shared library.
"""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from core.runtime import CompilationSession, SchemeEngine, TokenType
from core.runtime.drivers import ERROR, INVALID_CONFIG, SUCCESS, EngineDriver
from core.runtime.options import ConfigOption


class MemoryDriver(EngineDriver):
    """
    Engine driver keeping everything in lists.

    It rejects a second token with the same (pattern, tag) unless the
    ignore-duplicates option is on, and never normalizes token fields.
    Operations named in `failures` return the given (status, message).
    """

    def __init__(self, fail_init=False, reject_words=(), failures=None):
        self.fail_init = fail_init
        self.reject_words = set(reject_words)
        self.failures = dict(failures or {})
        self.calls = []
        self.tokens = []
        self.details = None
        self.options = {}
        self.flushed = False
        self.learned = []
        self.destroyed = False
        self.last_error = ""

    def _start(self, name):
        self.calls.append(name)
        self.last_error = ""
        if name in self.failures:
            status, message = self.failures[name]
            self.last_error = message
            return status
        return SUCCESS

    def _fail(self, message, status=ERROR):
        self.last_error = message
        return status

    def init(self, scheme_file):
        self.calls.append("init")
        if self.fail_init:
            return ERROR, None, f"Failed to open {scheme_file}"
        return SUCCESS, {"scheme_file": scheme_file}, ""

    def set_scheme_details(self, handle, language_code, identifier, display_name, author, compiled_date):
        status = self._start("set_scheme_details")
        if status == SUCCESS:
            self.details = (language_code, identifier, display_name, author, compiled_date)
        return status

    def create_token(self, handle, pattern, value1, value2, value3, tag, token_type, match_type, flags):
        status = self._start("create_token")
        if status != SUCCESS:
            return status
        ignore = self.options.get(ConfigOption.IGNORE_DUPLICATE_TOKEN, (0,))[0]
        if not ignore and any(t["pattern"] == pattern and t["tag"] == tag for t in self.tokens):
            return self._fail(f"There is already a token for pattern '{pattern}'")
        self.tokens.append({
            "type": token_type,
            "match_type": match_type,
            "tag": tag,
            "pattern": pattern,
            "value1": value1,
            "value2": value2,
            "value3": value3,
            "flags": flags,
        })
        return SUCCESS

    def generate_cv_combinations(self, handle):
        status = self._start("generate_cv_combinations")
        if status != SUCCESS:
            return status
        consonants = [t for t in self.tokens if t["type"] == TokenType.CONSONANT]
        vowels = [t for t in self.tokens if t["type"] == TokenType.VOWEL and t["value2"]]
        for consonant in consonants:
            for vowel in vowels:
                if consonant["tag"] != vowel["tag"]:
                    continue
                stem = consonant["pattern"][:-1] if consonant["pattern"].endswith("a") else consonant["pattern"]
                self.tokens.append({
                    "type": TokenType.CONSONANT_VOWEL,
                    "match_type": consonant["match_type"],
                    "tag": consonant["tag"],
                    "pattern": stem + vowel["pattern"],
                    "value1": consonant["value1"] + vowel["value2"],
                    "value2": "",
                    "value3": "",
                    "flags": 1,
                })
        return SUCCESS

    def config(self, handle, option_id, *values):
        status = self._start("config")
        if status != SUCCESS:
            return status
        if option_id not in set(ConfigOption):
            return self._fail(f"Invalid configuration key {option_id}", INVALID_CONFIG)
        self.options[option_id] = values
        return SUCCESS

    def flush_buffer(self, handle):
        status = self._start("flush_buffer")
        if status == SUCCESS:
            self.flushed = True
        return status

    def get_all_tokens(self, handle, token_type):
        status = self._start("get_all_tokens")
        if status != SUCCESS:
            return status, None
        return SUCCESS, [dict(t) for t in self.tokens if t["type"] == token_type]

    def transliterate(self, handle, text):
        status = self._start("transliterate")
        if status != SUCCESS:
            return status, None
        return SUCCESS, [{"text": t["value1"], "confidence": 1} for t in self.tokens if t["pattern"] == text]

    def reverse_transliterate(self, handle, text):
        status = self._start("reverse_transliterate")
        if status != SUCCESS:
            return status, ""
        for token in self.tokens:
            if token["value1"] == text:
                return SUCCESS, token["pattern"]
        return self._fail(f"Nothing to reverse transliterate for '{text}'"), ""

    def array_length(self, array):
        return len(array)

    def array_get_token(self, array, index):
        token = dict(array[index])
        token.pop("flags", None)
        return token

    def array_get_word(self, array, index):
        return dict(array[index])

    def learn(self, handle, word):
        status = self._start("learn")
        if status != SUCCESS:
            return status
        if not word.strip() or word in self.reject_words:
            return self._fail(f"Can't learn '{word}'")
        self.learned.append(word)
        return SUCCESS

    def learn_from_file(self, handle, path, callback):
        status = self._start("learn_from_file")
        if status != SUCCESS:
            return status, 0, 0
        if not os.path.exists(path):
            return self._fail(f"Failed to open {path}"), 0, 0
        total = failed = 0
        with open(path, encoding="utf-8") as f:
            for line in f:
                word = line.strip()
                if not word:
                    continue
                total += 1
                word_status = self.learn(handle, word)
                if word_status != SUCCESS:
                    failed += 1
                callback(word, word_status)
        self.last_error = ""
        return SUCCESS, total, failed

    def get_last_error(self, handle):
        return self.last_error

    def destroy(self, handle):
        self.destroyed = True


@pytest.fixture
def driver():
    return MemoryDriver()


@pytest.fixture
def engine(driver):
    """An engine initialized over the in-memory driver."""
    return SchemeEngine(driver).init_engine("test.vst")


@pytest.fixture
def session():
    return CompilationSession()


@pytest.fixture
def driver_factory():
    """The MemoryDriver class, for tests that need custom failures."""
    return MemoryDriver
