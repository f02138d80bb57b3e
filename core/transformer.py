"""
Scheme AST Transformer - Converts parsed scheme sources to declarations.

This module contains the SchemeTransformer class that turns Lark parse trees
into plain declaration dicts the compiler driver walks in source order.
"""

import ast
from lark import Transformer, v_args

from core.runtime.models import MatchType, TokenType

SECTION_TYPES = {
    "vowels": TokenType.VOWEL,
    "consonants": TokenType.CONSONANT,
    "dead_consonants": TokenType.DEAD_CONSONANT,
    "consonant_vowels": TokenType.CONSONANT_VOWEL,
    "numbers": TokenType.NUMBER,
    "symbols": TokenType.SYMBOL,
    "anusvara": TokenType.ANUSVARA,
    "visarga": TokenType.VISARGA,
    "virama": TokenType.VIRAMA,
    "others": TokenType.OTHER,
    "non_joiner": TokenType.NON_JOINER,
}

ARROW_MATCH_TYPES = {
    "=>": MatchType.EXACT,
    "~>": MatchType.POSSIBILITY,
}


def unquote(token):
    """Turn a STRING token into its Python value, escapes included."""
    return ast.literal_eval(str(token))


def _line(meta):
    return getattr(meta, "line", None)


class SchemeTransformer(Transformer):
    """
    Transforms scheme AST nodes into declaration dicts.

    Every declaration carries a `kind` and the 1-based `line` it starts on.
    Mappings additionally carry `text`, the source rendering used to name
    the expression in diagnostics.
    """

    def start(self, items):
        return list(items)

    @v_args(meta=True)
    def include_stmt(self, meta, args):
        return {"kind": "include", "path": unquote(args[0]), "line": _line(meta)}

    @v_args(meta=True)
    def scheme_block(self, meta, args):
        fields = {}
        for key, value in args[1:]:
            fields[key] = value
        return {"kind": "details", "fields": fields, "line": _line(meta)}

    def detail_field(self, args):
        return (str(args[0]), unquote(args[1]))

    @v_args(meta=True)
    def set_stmt(self, meta, args):
        name, (value, raw) = str(args[0]), args[1]
        return {
            "kind": "set",
            "name": name,
            "value": value,
            "text": f"set {name} {raw}",
            "line": _line(meta),
        }

    def option_value(self, args):
        token = args[0]
        if token.type == "BOOLEAN":
            return (str(token) == "true", str(token))
        return (unquote(token), str(token))

    @v_args(meta=True)
    def token_section(self, meta, args):
        section = str(args[0])
        tag = None
        mappings = []
        for item in args[1:]:
            if isinstance(item, dict):
                mappings.append(item)
            else:
                tag = item
        return {
            "kind": "tokens",
            "section": section,
            "token_type": SECTION_TYPES[section],
            "tag": tag,
            "mappings": mappings,
            "line": _line(meta),
        }

    def section_tag(self, args):
        return unquote(args[0])

    @v_args(meta=True)
    def mapping(self, meta, args):
        (patterns, left), arrow, (values, right) = args
        return {
            "patterns": patterns,
            "values": values,
            "match_type": ARROW_MATCH_TYPES[str(arrow)],
            "text": f"{left} {arrow} {right}",
            "line": _line(meta),
        }

    def symbols(self, args):
        raw = [str(token) for token in args]
        text = raw[0] if len(raw) == 1 else "[" + ", ".join(raw) + "]"
        return ([unquote(token) for token in args], text)

    @v_args(meta=True)
    def generate_stmt(self, meta, args):
        return {"kind": "generate_cv", "line": _line(meta)}
