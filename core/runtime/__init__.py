# Scheme compiler runtime
"""
Runtime modules for scheme compilation:
- result: Ok, Err, EngineError, ErrorKind
- models: Token, Word, SchemeDetails and their enums
- options: typed engine configuration options
- sink: diagnostic formatting
- session: CompilationSession (errors, warnings, registered tokens)
- drivers: EngineDriver and the ctypes binding
- engine: SchemeEngine facade
- config: compiler configuration lookup
"""

from .result import EngineError, Err, ErrorKind, Ok, Result
from .models import SYMBOL_MAX, LearnStatus, MatchType, SchemeDetails, Token, TokenType, Word
from .options import ConfigOption, EnableSuggestions, IgnoreDuplicateToken, UseDeadConsonants, build_option
from .sink import Severity, format_location, format_message
from .session import CompilationSession
from .drivers import CtypesDriver, EngineDriver, load_driver
from .engine import SchemeEngine, open_engine

__all__ = [
    'EngineError', 'Err', 'ErrorKind', 'Ok', 'Result',
    'SYMBOL_MAX', 'LearnStatus', 'MatchType', 'SchemeDetails', 'Token', 'TokenType', 'Word',
    'ConfigOption', 'EnableSuggestions', 'IgnoreDuplicateToken', 'UseDeadConsonants', 'build_option',
    'Severity', 'format_location', 'format_message',
    'CompilationSession',
    'CtypesDriver', 'EngineDriver', 'load_driver',
    'SchemeEngine', 'open_engine',
]
