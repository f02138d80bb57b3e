# Scheme Compiler - Core Components
"""
Core modules for the scheme compiler:
- errors: Compile errors and source context helpers
- grammar: Lark grammar for scheme source files
- transformer: AST to declaration transformation
- runtime: Compilation session, token model and engine facade
"""

from .errors import SchemeCompileError, FatalIO
from .grammar import scheme_grammar
from .transformer import SchemeTransformer

__all__ = [
    'SchemeCompileError',
    'FatalIO',
    'scheme_grammar',
    'SchemeTransformer',
]
