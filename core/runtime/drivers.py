"""
Transliteration engine drivers.

A driver exposes the engine's entry points one to one and returns raw
integer statuses. Turning statuses into results is SchemeEngine's job.
"""
import ctypes
from abc import ABC, abstractmethod
from typing import Callable, Dict, Tuple

from core.errors import FatalIO
from core.runtime.models import SYMBOL_MAX

# Engine status codes
SUCCESS = 0
MISUSE = 1
MEMORY_ERROR = 2
ERROR = 3
PARTIAL_RENDERING = 4
STORAGE_ERROR = 5
INVALID_CONFIG = 6
ARGS_ERROR = 7

# Called once per word while learning from a file: (word, status)
LearnCallback = Callable[[str, int], None]


class EngineDriver(ABC):
    """Abstract base class for transliteration engine bindings."""

    @abstractmethod
    def init(self, scheme_file: str) -> Tuple[int, object, str]:
        """Open `scheme_file`; returns (status, handle, message)."""

    @abstractmethod
    def set_scheme_details(self, handle, language_code: str, identifier: str,
                           display_name: str, author: str, compiled_date: str) -> int:
        pass

    @abstractmethod
    def create_token(self, handle, pattern: str, value1: str, value2: str, value3: str,
                     tag: str, token_type: int, match_type: int, flags: int) -> int:
        pass

    @abstractmethod
    def generate_cv_combinations(self, handle) -> int:
        pass

    @abstractmethod
    def config(self, handle, option_id: int, *values) -> int:
        pass

    @abstractmethod
    def flush_buffer(self, handle) -> int:
        pass

    @abstractmethod
    def get_all_tokens(self, handle, token_type: int) -> Tuple[int, object]:
        """Returns (status, array) where array is read with array_length/array_get_token."""

    @abstractmethod
    def transliterate(self, handle, text: str) -> Tuple[int, object]:
        """Returns (status, array) where array is read with array_length/array_get_word."""

    @abstractmethod
    def reverse_transliterate(self, handle, text: str) -> Tuple[int, str]:
        pass

    @abstractmethod
    def array_length(self, array) -> int:
        pass

    @abstractmethod
    def array_get_token(self, array, index: int) -> Dict:
        """Copy the token at `index` into a plain dict of Token fields."""

    @abstractmethod
    def array_get_word(self, array, index: int) -> Dict:
        """Copy the word at `index` into a dict with `text` and `confidence`."""

    @abstractmethod
    def learn(self, handle, word: str) -> int:
        pass

    @abstractmethod
    def learn_from_file(self, handle, path: str, callback: LearnCallback) -> Tuple[int, int, int]:
        """Returns (status, total_words, failed)."""

    @abstractmethod
    def get_last_error(self, handle) -> str:
        pass

    def destroy(self, handle):
        """Release `handle`. Drivers without teardown keep the default."""


# ==========================================
# CTYPES DRIVER
# ==========================================

class _Token(ctypes.Structure):
    _fields_ = [
        ("id", ctypes.c_int),
        ("type", ctypes.c_int),
        ("match_type", ctypes.c_int),
        ("tag", ctypes.c_char * SYMBOL_MAX),
        ("pattern", ctypes.c_char * SYMBOL_MAX),
        ("value1", ctypes.c_char * SYMBOL_MAX),
        ("value2", ctypes.c_char * SYMBOL_MAX),
        ("value3", ctypes.c_char * SYMBOL_MAX),
    ]


class _Word(ctypes.Structure):
    _fields_ = [
        ("text", ctypes.c_char_p),
        ("confidence", ctypes.c_int),
    ]


class _LearnStatus(ctypes.Structure):
    _fields_ = [
        ("total_words", ctypes.c_int),
        ("failed", ctypes.c_int),
    ]


_LEARN_CALLBACK = ctypes.CFUNCTYPE(None, ctypes.c_void_p, ctypes.c_char_p, ctypes.c_int, ctypes.c_void_p)


def _encode(value):
    return value.encode("utf-8") if value is not None else None


def _decode(value):
    return value.decode("utf-8") if value else ""


class CtypesDriver(EngineDriver):
    """Driver for the engine's C ABI, loaded as a shared library."""

    _SIGNATURES = {
        "varnam_init": ([ctypes.c_char_p, ctypes.POINTER(ctypes.c_void_p), ctypes.POINTER(ctypes.c_char_p)], ctypes.c_int),
        "varnam_set_scheme_details": ([ctypes.c_void_p] + [ctypes.c_char_p] * 5, ctypes.c_int),
        "varnam_create_token": ([ctypes.c_void_p] + [ctypes.c_char_p] * 5 + [ctypes.c_int] * 3, ctypes.c_int),
        "varnam_generate_cv_combinations": ([ctypes.c_void_p], ctypes.c_int),
        "varnam_flush_buffer": ([ctypes.c_void_p], ctypes.c_int),
        "varnam_get_all_tokens": ([ctypes.c_void_p, ctypes.c_int, ctypes.POINTER(ctypes.c_void_p)], ctypes.c_int),
        "varnam_transliterate": ([ctypes.c_void_p, ctypes.c_char_p, ctypes.POINTER(ctypes.c_void_p)], ctypes.c_int),
        "varnam_reverse_transliterate": ([ctypes.c_void_p, ctypes.c_char_p, ctypes.POINTER(ctypes.c_char_p)], ctypes.c_int),
        "varnam_learn": ([ctypes.c_void_p, ctypes.c_char_p], ctypes.c_int),
        "varnam_learn_from_file": ([ctypes.c_void_p, ctypes.c_char_p, ctypes.POINTER(_LearnStatus), _LEARN_CALLBACK, ctypes.c_void_p], ctypes.c_int),
        "varnam_get_last_error": ([ctypes.c_void_p], ctypes.c_char_p),
        "varray_length": ([ctypes.c_void_p], ctypes.c_int),
        "varray_get": ([ctypes.c_void_p, ctypes.c_int], ctypes.c_void_p),
    }

    def __init__(self, library_path):
        self.library_path = library_path
        self.lib = ctypes.CDLL(library_path)
        for name, (argtypes, restype) in self._SIGNATURES.items():
            function = getattr(self.lib, name)
            function.argtypes = argtypes
            function.restype = restype
        # Variadic: arguments are converted per call in config()
        self.lib.varnam_config.restype = ctypes.c_int

    def init(self, scheme_file):
        handle = ctypes.c_void_p()
        message = ctypes.c_char_p()
        status = self.lib.varnam_init(_encode(scheme_file), ctypes.byref(handle), ctypes.byref(message))
        return status, handle, _decode(message.value)

    def set_scheme_details(self, handle, language_code, identifier, display_name, author, compiled_date):
        return self.lib.varnam_set_scheme_details(
            handle, _encode(language_code), _encode(identifier), _encode(display_name),
            _encode(author), _encode(compiled_date),
        )

    def create_token(self, handle, pattern, value1, value2, value3, tag, token_type, match_type, flags):
        return self.lib.varnam_create_token(
            handle, _encode(pattern), _encode(value1), _encode(value2), _encode(value3),
            _encode(tag), token_type, match_type, flags,
        )

    def generate_cv_combinations(self, handle):
        return self.lib.varnam_generate_cv_combinations(handle)

    def config(self, handle, option_id, *values):
        converted = []
        for value in values:
            if isinstance(value, str):
                converted.append(ctypes.c_char_p(_encode(value)))
            else:
                converted.append(ctypes.c_int(int(value)))
        return self.lib.varnam_config(handle, ctypes.c_int(option_id), *converted)

    def flush_buffer(self, handle):
        return self.lib.varnam_flush_buffer(handle)

    def get_all_tokens(self, handle, token_type):
        array = ctypes.c_void_p()
        status = self.lib.varnam_get_all_tokens(handle, token_type, ctypes.byref(array))
        return status, array

    def transliterate(self, handle, text):
        array = ctypes.c_void_p()
        status = self.lib.varnam_transliterate(handle, _encode(text), ctypes.byref(array))
        return status, array

    def reverse_transliterate(self, handle, text):
        output = ctypes.c_char_p()
        status = self.lib.varnam_reverse_transliterate(handle, _encode(text), ctypes.byref(output))
        return status, _decode(output.value)

    def array_length(self, array):
        return self.lib.varray_length(array)

    def array_get_token(self, array, index):
        pointer = self.lib.varray_get(array, index)
        token = ctypes.cast(pointer, ctypes.POINTER(_Token)).contents
        return {
            "type": token.type,
            "match_type": token.match_type,
            "tag": _decode(token.tag),
            "pattern": _decode(token.pattern),
            "value1": _decode(token.value1),
            "value2": _decode(token.value2),
            "value3": _decode(token.value3),
        }

    def array_get_word(self, array, index):
        pointer = self.lib.varray_get(array, index)
        word = ctypes.cast(pointer, ctypes.POINTER(_Word)).contents
        return {"text": _decode(word.text), "confidence": word.confidence}

    def learn(self, handle, word):
        return self.lib.varnam_learn(handle, _encode(word))

    def learn_from_file(self, handle, path, callback):
        def on_word(_handle, word, status, _object):
            callback(_decode(word), status)

        learn_status = _LearnStatus()
        # Keep a reference for the duration of the call
        c_callback = _LEARN_CALLBACK(on_word)
        status = self.lib.varnam_learn_from_file(handle, _encode(path), ctypes.byref(learn_status), c_callback, None)
        return status, learn_status.total_words, learn_status.failed

    def get_last_error(self, handle):
        return _decode(self.lib.varnam_get_last_error(handle))

    def destroy(self, handle):
        destroy = getattr(self.lib, "varnam_destroy", None)
        if destroy is not None and handle:
            destroy.argtypes = [ctypes.c_void_p]
            destroy.restype = None
            destroy(handle)


def load_driver(library_path):
    """Factory function: load the engine shared library or fail fatally."""
    try:
        return CtypesDriver(library_path)
    except (OSError, AttributeError) as e:
        raise FatalIO(f"Unable to load transliteration engine: {e}", path=library_path)
