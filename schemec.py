import argparse
import sys
import os
from compiler import compile_scheme, set_verbose
from core.errors import FatalIO, SchemeCompileError
from core.runtime import CompilationSession, EnableSuggestions, SchemeEngine, load_driver
from core.runtime.config import load_compiler_config, resolve_library, default_output_path

def log(message):
    """Log informational messages to stderr."""
    print(f"\033[92m\033[1mINFO:\033[0m {message}", file=sys.stderr)

def inform(message):
    print(f"   {message}", file=sys.stderr)

def report(session):
    """Print collected diagnostics; returns the process exit status."""
    for message in session.warning_messages:
        print(message, file=sys.stderr)
    for message in session.error_messages:
        print(message, file=sys.stderr)
    inform(f"{session.error_count()} error(s), {session.warning_count()} warning(s)")
    return 1 if session.error_count() > 0 else 0

def load_engine_driver(args):
    config = load_compiler_config()
    return load_driver(resolve_library(args.library, config))

def open_scheme_engine(args, scheme_file):
    return SchemeEngine(load_engine_driver(args)).init_engine(scheme_file)

def cmd_compile(args):
    set_verbose(args.verbose)
    source = args.source
    if not os.path.exists(source):
        print(f"Error: File '{source}' not found.", file=sys.stderr)
        return 1

    output = args.output or default_output_path(source)
    log(f"Compiling {source} into {output}")
    session = CompilationSession()
    try:
        # The previous build survives a library that fails to load
        driver = load_engine_driver(args)
        if os.path.exists(output):
            os.remove(output)
        with SchemeEngine(driver).init_engine(output) as engine:
            compile_scheme(source, engine, session)
    except (FatalIO, SchemeCompileError) as e:
        print(f"Error: Compilation Failed:\n{e}", file=sys.stderr)
        return 1

    status = report(session)
    if status == 0:
        log(f"Scheme compiled to {output}")
    return status

def cmd_learn(args):
    set_verbose(args.verbose)
    session = CompilationSession()
    try:
        with open_scheme_engine(args, args.scheme) as engine:
            if args.suggestions:
                configured = engine.configure(EnableSuggestions(path=args.suggestions))
                if configured.is_err():
                    session.record_error(configured.error)
                    return report(session)
            for path in args.files:
                log(f"Learning words from {path}")
                result = engine.learn_from_file(path, session)
                if result.is_err():
                    session.record_error(result.error, location=path)
                    continue
                learned = result.unwrap()
                inform(f"{learned.total_words - learned.failed} of {learned.total_words} words learned")
    except FatalIO as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return report(session)


def main():
    parser = argparse.ArgumentParser(description="Transliteration scheme compiler")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output (sent to stderr)")
    parser.add_argument("--library", help="Path to the transliteration engine shared library")
    subparsers = parser.add_subparsers(dest="command")

    compile_parser = subparsers.add_parser("compile", help="Compile a scheme source file")
    compile_parser.add_argument("source", help="Scheme source file")
    compile_parser.add_argument("--output", help="Compiled scheme file (default: <source>.vst)")

    learn = subparsers.add_parser("learn", help="Teach words to a compiled scheme")
    learn.add_argument("scheme", help="Compiled scheme file")
    learn.add_argument("files", nargs="+", help="Files with one word per line")
    learn.add_argument("--suggestions", help="Suggestions file the engine stores learned words in")

    args = parser.parse_args()

    if args.command == "compile": sys.exit(cmd_compile(args))
    elif args.command == "learn": sys.exit(cmd_learn(args))
    else: parser.print_help()

if __name__ == "__main__":
    main()
