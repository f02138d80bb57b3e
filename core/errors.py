"""
Error handling utilities for the scheme compiler.
"""
import re


class SchemeCompileError(Exception):
    """Scheme source could not be compiled at all (syntax, unreadable include)."""
    def __init__(self, message, line_number=None, column=None, context=None, suggestion=None, path=None):
        self.message = message
        self.line_number = line_number
        self.column = column
        self.context = context  # The offending line
        self.suggestion = suggestion  # How to fix it
        self.path = path
        super().__init__(self._format_error())

    def _format_error(self):
        """Format the error message with context and suggestion."""
        lines = ["\nCompilation Error"]
        if self.path:
            lines.append(f" in {self.path}")
        if self.line_number:
            lines.append(f" at line {self.line_number}")
            if self.column:
                lines.append(f", column {self.column}")
        lines.append(":\n")

        lines.append(f"   {self.message}\n")

        if self.context:
            lines.append(f"   > {self.context}\n")

        if self.suggestion:
            lines.append(f"   Hint: {self.suggestion}\n")

        return "".join(lines)


class FatalIO(Exception):
    """The engine library or the compiled scheme file could not be opened."""
    def __init__(self, message, path=None):
        self.message = message
        self.path = path
        super().__init__(f"{message} ({path})" if path else message)


def get_line_context(source_code, line_number):
    """Extract the line of code from source by line number (1-based)."""
    if not source_code or line_number is None:
        return None
    source_lines = source_code.split('\n')
    if 0 < line_number <= len(source_lines):
        return source_lines[line_number - 1].strip()
    return None


_STRING_LITERAL = re.compile(r'"(?:[^"\\\n]|\\.)*"')
_COMMENT = re.compile(r'(//|#)[^\n]*')


def _strip_literals(source_code):
    """Blank out strings and comments so their brackets are not counted."""
    return _COMMENT.sub('', _STRING_LITERAL.sub('""', source_code))


def detect_common_error_patterns(source_code):
    """Detect common mistakes in scheme sources and return a hint."""
    code = _strip_literals(source_code)
    open_braces = code.count('{')
    close_braces = code.count('}')
    if open_braces != close_braces:
        return f"Unmatched braces: found {open_braces} '{{' but {close_braces} '}}'"

    open_brackets = code.count('[')
    close_brackets = code.count(']')
    if open_brackets != close_brackets:
        return f"Unmatched brackets: found {open_brackets} '[' but {close_brackets} ']'"

    if re.search(r'"[^"\n]*"\s*=\s*"', source_code):
        return "Mappings use '=>' (exact) or '~>' (possibility), not '='"

    if re.search(r'^\s*(set\s+\w+\s+\S+|generate_cv|include\s+"[^"]*")\s*$', source_code, re.MULTILINE):
        return "Statements should end with ';'"

    return None
