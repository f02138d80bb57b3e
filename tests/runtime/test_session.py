"""
Unit tests for CompilationSession and diagnostic formatting.
"""
import pytest

from core.runtime import CompilationSession, ErrorKind, MatchType, Token, TokenType
from core.runtime.sink import Severity, format_location, format_message


class TestFormatMessage:
    """Tests for the message sink."""

    def test_error_with_location_and_expression(self):
        message = format_message(Severity.ERROR, "Duplicate token", '"ka" => "k"', "ml.scheme:4")
        assert message == 'ml.scheme:4 : ERROR : In expression "ka" => "k". Duplicate token'

    def test_warning_without_expression(self):
        message = format_message(Severity.WARNING, "Cycle detected", location="ml.scheme:1")
        assert message == "ml.scheme:1 : WARNING : Cycle detected"

    def test_without_location(self):
        assert format_message("ERROR", "boom") == "ERROR : boom"

    def test_format_location(self):
        assert format_location("ml.scheme", 12) == "ml.scheme:12"
        assert format_location("ml.scheme") == "ml.scheme"


class TestDiagnostics:
    """Tests for error and warning recording."""

    def test_record_error_counts_once(self, session):
        session.record_error("first")
        assert session.error_count() == 1
        session.record_error("second")
        assert session.error_count() == 2
        assert len(session.error_messages) == 2
        assert session.warning_count() == 0

    def test_record_warning_counts_once(self, session):
        session.record_warning("careful")
        assert session.warning_count() == 1
        assert session.error_count() == 0
        assert session.warning_messages == ["WARNING : careful"]

    def test_messages_are_appended_in_order(self, session):
        for message in ["a", "b", "c"]:
            session.record_error(message)
        assert [m.split(" : ")[-1] for m in session.error_messages] == ["a", "b", "c"]

    def test_expression_prefix_only_while_active(self, session):
        session.set_current_expression('"ka" => "k"', "ml.scheme:3")
        session.record_error("rejected")
        session.clear_current_expression()
        session.record_error("later")

        assert '"ka" => "k"' in session.error_messages[0]
        assert "ml.scheme:3" in session.error_messages[0]
        assert "In expression" not in session.error_messages[1]
        assert "ml.scheme:3" not in session.error_messages[1]

    def test_expression_context_clears_on_exception(self, session):
        with pytest.raises(RuntimeError):
            with session.expression('"ga" => "g"'):
                raise RuntimeError("declaration blew up")
        assert session.current_expression is None
        session.record_warning("unrelated")
        assert "ga" not in session.warning_messages[0]

    def test_explicit_location_wins(self, session):
        with session.expression("x", "a.scheme:1"):
            session.record_error("boom", location="b.scheme:9")
        assert session.error_messages[0].startswith("b.scheme:9 : ERROR")

    def test_succeeded_ignores_warnings(self, session):
        session.record_warning("only a warning")
        assert session.succeeded() is True
        session.record_error("now an error")
        assert session.succeeded() is False

    def test_sessions_are_independent(self):
        first, second = CompilationSession(), CompilationSession()
        first.record_error("only here")
        assert second.error_count() == 0
        assert second.error_messages == []


class TestRegisterToken:
    """Tests for local token validation."""

    def test_valid_mapping_is_stored(self, session):
        result = session.register_token({"type": TokenType.VOWEL, "pattern": "a", "value1": "അ"})
        assert result.is_ok()
        token = result.unwrap()
        assert token.match_type == MatchType.EXACT
        assert session.tokens[("a", "")] == token
        assert session.error_count() == 0

    def test_token_instance_is_accepted(self, session):
        token = Token(type=TokenType.CONSONANT, pattern="ka", value1="ക", tag="velar")
        assert session.register_token(token).unwrap() is token
        assert ("ka", "velar") in session.tokens

    def test_empty_value_is_rejected(self, session):
        result = session.register_token({"type": TokenType.CONSONANT, "pattern": "ka", "value1": ""})
        assert result.is_err()
        assert result.error.kind == ErrorKind.VALIDATION_ERROR
        assert session.error_count() == 1
        assert "ka" in session.error_messages[0]
        assert session.tokens == {}

    @pytest.mark.parametrize("field", ["pattern", "value1", "value2", "value3", "tag"])
    def test_over_length_field_is_rejected(self, session, field):
        fields = {"type": TokenType.SYMBOL, "pattern": "p", "value1": "v"}
        fields[field] = "x" * 31
        result = session.register_token(fields)
        assert result.is_err()
        assert session.error_count() == 1
        assert field in session.error_messages[0]

    def test_length_is_measured_in_bytes(self, session):
        # Each Malayalam letter takes three bytes
        assert session.register_token({"type": TokenType.SYMBOL, "pattern": "s", "value1": "ക" * 10}).is_ok()
        assert session.register_token({"type": TokenType.SYMBOL, "pattern": "t", "value1": "ക" * 11}).is_err()
        assert session.error_count() == 1

    def test_missing_type_is_rejected(self, session):
        result = session.register_token({"pattern": "a", "value1": "അ"})
        assert result.is_err()
        assert "type" in session.error_messages[0]

    @pytest.mark.parametrize("value", [None, "ka", 42])
    def test_non_mapping_is_recorded_not_raised(self, session, value):
        result = session.register_token(value)
        assert result.is_err()
        assert result.error.kind == ErrorKind.VALIDATION_ERROR
        assert session.error_count() == 1
        assert type(value).__name__ in session.error_messages[0]
        assert session.tokens == {}

    def test_inherits_current_tag(self, session):
        with session.tag("chillu"):
            token = session.register_token({"type": TokenType.DEAD_CONSONANT, "pattern": "n", "value1": "ൻ"}).unwrap()
        assert token.tag == "chillu"
        assert session.current_tag is None

    def test_explicit_tag_is_kept(self, session):
        session.set_current_tag("chillu")
        token = session.register_token({
            "type": TokenType.CONSONANT, "pattern": "na", "value1": "ന", "tag": "dental",
        }).unwrap()
        session.clear_current_tag()
        assert token.tag == "dental"

    def test_same_key_overwrites_without_diagnostics(self, session):
        session.register_token({"type": TokenType.CONSONANT, "pattern": "ka", "value1": "ക"})
        session.register_token({"type": TokenType.CONSONANT, "pattern": "ka", "value1": "ഖ"})
        assert session.tokens[("ka", "")].value1 == "ഖ"
        assert session.error_count() == 0
        assert session.warning_count() == 0

    def test_error_attributed_to_current_expression(self, session):
        with session.expression('"ka" => ""', "ml.scheme:2"):
            session.register_token({"type": TokenType.CONSONANT, "pattern": "ka", "value1": ""})
        assert session.error_messages[0].startswith('ml.scheme:2 : ERROR : In expression "ka" => "".')
