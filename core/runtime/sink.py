"""
Diagnostic formatting for scheme compilation messages.
"""
from enum import Enum


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


def format_location(path, line=None):
    """Render a `file:line` source location; `line` is 1-based."""
    if line is None:
        return str(path)
    return f"{path}:{line}"


def format_message(severity, message, expression=None, location=None):
    """
    Build the final diagnostic string.

    Example:
        >>> format_message(Severity.ERROR, "Duplicate token", '"ka" => "k"', "ml.scheme:4")
        'ml.scheme:4 : ERROR : In expression "ka" => "k". Duplicate token'
    """
    parts = []
    if location:
        parts.append(str(location))
    parts.append(Severity(severity).value)
    if expression is None:
        parts.append(message)
    else:
        parts.append(f"In expression {expression}. {message}")
    return " : ".join(parts)
