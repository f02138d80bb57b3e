import sys
import os
import re
from lark import Lark
from lark.exceptions import LarkError, VisitError
from pydantic import ValidationError

from core.errors import SchemeCompileError, get_line_context, detect_common_error_patterns
from core.grammar import scheme_grammar
from core.transformer import SchemeTransformer
from core.runtime import CompilationSession, SchemeDetails, build_option, format_location

# Global verbose flag
_VERBOSE = False

MAX_VALUES = 3

def set_verbose(value):
    """Set the global verbose flag."""
    global _VERBOSE
    _VERBOSE = value

def debug_log(message):
    """Log a debug message to stderr if verbose mode is enabled."""
    if _VERBOSE:
        print(f"\033[94mDEBUG:\033[0m {message}", file=sys.stderr)

_PARSER = None

def get_parser():
    global _PARSER
    if _PARSER is None:
        _PARSER = Lark(scheme_grammar, parser='earley', propagate_positions=True)
    return _PARSER

def parse_scheme(source_code, file_path="<string>"):
    """Parse scheme source into declaration dicts. Raises SchemeCompileError."""
    try:
        tree = get_parser().parse(source_code)
    except LarkError as e:
        error_msg = str(e)
        line_number = getattr(e, 'line', None)
        column = getattr(e, 'column', None)
        if line_number is None:
            match = re.search(r'line (\d+) col (\d+)', error_msg)
            if match:
                line_number = int(match.group(1))
                column = int(match.group(2))
        if line_number is not None and line_number < 1:
            line_number, column = None, None

        suggestion_text = detect_common_error_patterns(source_code) or "Check syntax around this line"

        raise SchemeCompileError(
            message="Syntax error",
            line_number=line_number,
            column=column,
            context=get_line_context(source_code, line_number),
            suggestion=suggestion_text,
            path=file_path,
        )

    try:
        return SchemeTransformer().transform(tree)
    except VisitError as e:
        raise SchemeCompileError(
            message=f"Transformation error: {e.orig_exc}",
            suggestion="Check string escapes",
            path=file_path,
        )


class SchemeCompiler:
    """
    Walks scheme declarations through a session and an engine.

    Local validation failures and engine rejections become diagnostics on the
    session; compilation always continues with the next declaration.
    """

    def __init__(self, session, engine):
        self.session = session
        self.engine = engine
        self._visited = set()
        self.root_path = None

    def compile_file(self, file_path, source_code=None):
        abs_path = os.path.abspath(file_path)
        if abs_path in self._visited:
            self.session.record_warning(f"Cycle detected: {file_path} skipped")
            return
        self._visited.add(abs_path)
        if self.root_path is None:
            self.root_path = file_path

        if source_code is None:
            if not os.path.exists(abs_path):
                raise SchemeCompileError(f"Scheme file not found: {file_path}", path=file_path)
            with open(abs_path, 'r', encoding='utf-8') as f:
                source_code = f.read()

        debug_log(f"Compiling scheme: {file_path}")
        for declaration in parse_scheme(source_code, file_path):
            handler = getattr(self, f"_compile_{declaration['kind']}")
            handler(declaration, file_path)

    def _location(self, file_path, line):
        return format_location(file_path, line)

    def _compile_include(self, declaration, file_path):
        base_dir = os.path.dirname(os.path.abspath(file_path))
        include_path = os.path.join(base_dir, declaration['path'])
        with self.session.expression(f'include "{declaration["path"]}"', self._location(file_path, declaration['line'])):
            if not os.path.exists(include_path):
                self.session.record_error(f"Include not found: {include_path}")
                return
            self.compile_file(include_path)

    def _compile_details(self, declaration, file_path):
        with self.session.expression("scheme", self._location(file_path, declaration['line'])):
            try:
                details = SchemeDetails(**declaration['fields'])
            except ValidationError as e:
                missing = ", ".join(str(item['loc'][0]) for item in e.errors())
                self.session.record_error(f"Missing or invalid scheme details: {missing}")
                return
            result = self.engine.set_scheme_details(details)
            if result.is_err():
                self.session.record_error(result.error)

    def _compile_set(self, declaration, file_path):
        with self.session.expression(declaration['text'], self._location(file_path, declaration['line'])):
            try:
                option = build_option(declaration['name'], declaration['value'])
            except KeyError:
                self.session.record_error(f"Unknown option '{declaration['name']}'")
                return
            except (ValueError, ValidationError) as e:
                self.session.record_error(f"Option '{declaration['name']}' {e}")
                return
            debug_log(f"Configuring {declaration['name']} = {declaration['value']}")
            result = self.engine.configure(option)
            if result.is_err():
                self.session.record_error(result.error)

    def _compile_tokens(self, declaration, file_path):
        tag = declaration['tag'] or self.session.current_tag
        with self.session.tag(tag):
            for mapping in declaration['mappings']:
                location = self._location(file_path, mapping['line'])
                with self.session.expression(mapping['text'], location):
                    self._compile_mapping(declaration['token_type'], mapping)

    def _compile_mapping(self, token_type, mapping):
        values = mapping['values']
        if len(values) > MAX_VALUES:
            self.session.record_error(f"A token takes at most {MAX_VALUES} values, got {len(values)}")
            return
        values = values + [""] * (MAX_VALUES - len(values))
        for pattern in mapping['patterns']:
            registered = self.session.register_token({
                "type": token_type,
                "match_type": mapping['match_type'],
                "pattern": pattern,
                "value1": values[0],
                "value2": values[1],
                "value3": values[2],
            })
            if registered.is_err():
                continue
            token = registered.unwrap()
            debug_log(f"Creating {token_type.name.lower()} token '{token.pattern}'")
            created = self.engine.create_token(token)
            if created.is_err():
                self.session.record_error(created.error)

    def _compile_generate_cv(self, declaration, file_path):
        with self.session.expression("generate_cv", self._location(file_path, declaration['line'])):
            debug_log("Generating consonant-vowel combinations")
            result = self.engine.generate_combinations()
            if result.is_err():
                self.session.record_error(result.error)

    def finish(self):
        """Flush buffered engine writes when the scheme compiled cleanly."""
        if not self.session.succeeded():
            debug_log(f"Skipping flush, {self.session.error_count()} error(s) recorded")
            return
        result = self.engine.flush()
        if result.is_err():
            self.session.record_error(result.error, location=self.root_path)


def compile_scheme(file_path, engine, session=None, source_code=None):
    """
    Compile one scheme source file into an initialized engine.

    Returns the CompilationSession holding every diagnostic; the scheme
    compiled successfully iff session.error_count() == 0.
    """
    if session is None:
        session = CompilationSession()
    compiler = SchemeCompiler(session, engine)
    compiler.compile_file(file_path, source_code)
    compiler.finish()
    return session
