"""
Scheme source grammar.

This module contains the Lark grammar for scheme definition files.
"""

scheme_grammar = r"""
    start: declaration*

    ?declaration: include_stmt | scheme_block | set_stmt | token_section | generate_stmt

    // --- Includes ---
    include_stmt: "include" STRING ";"

    // --- Metadata ---
    scheme_block: SCHEME "{" (detail_field ","?)* "}"
    detail_field: DETAIL_KEY ":" STRING
    DETAIL_KEY: "language_code" | "identifier" | "display_name" | "author" | "compiled_date"

    // --- Engine options ---
    set_stmt: "set" NAME option_value ";"
    option_value: STRING | BOOLEAN

    // --- Tokens ---
    token_section: SECTION section_tag? "{" (mapping ","?)* "}"
    section_tag: "tag" STRING
    SECTION: "vowels" | "consonants" | "dead_consonants" | "consonant_vowels"
           | "numbers" | "symbols" | "anusvara" | "visarga" | "virama"
           | "others" | "non_joiner"

    mapping: symbols ARROW symbols
    symbols: STRING | "[" STRING ("," STRING)* "]"
    ARROW: "=>" | "~>"

    // --- Combinations ---
    generate_stmt: GENERATE_CV ";"
    GENERATE_CV: "generate_cv"

    // --- Terminals ---
    SCHEME: "scheme"
    BOOLEAN: "true" | "false"
    STRING: /"(?:[^"\\]|\\.)*"/
    NAME: /(?!(?:true|false)\b)[a-z_][a-z0-9_]*/

    COMMENT_1: /\/\/[^\n]*/
    COMMENT_2: /\#[^\n]*/

    %import common.WS
    %ignore WS
    %ignore COMMENT_1
    %ignore COMMENT_2
"""
