"""Tests for schemas/enum.py."""

import pytest

from wschema import ParseContext, s
from wschema.errors import DefinitionError
from wschema.models import IssueCode


class TestEnumParse:
    def test_member_passes_unchanged(self):
        assert s.enum(["a", "b", "c"]).parse("b") == "b"

    def test_non_member_single_issue(self):
        result = s.enum(["a", "b", "c"]).safe_parse("z")
        assert result.success is False
        assert len(result.error.issues) == 1
        issue = result.error.issues[0]
        assert issue.code == IssueCode.INVALID_ENUM_VALUE
        assert list(issue.options) == ["a", "b", "c"]
        assert issue.input == "z"
        assert issue.message == "Invalid enum value. Expected 'a' | 'b' | 'c', received 'z'"

    def test_options_keep_declaration_order(self):
        issue = s.enum(["zeta", "alpha", "mu"]).safe_parse("x").error.issues[0]
        assert list(issue.options) == ["zeta", "alpha", "mu"]

    @pytest.mark.parametrize("value", [None, 1, ["a"], {"a": 1}])
    def test_non_string_rejected(self, value):
        issue = s.enum(["a"]).safe_parse(value).error.issues[0]
        assert issue.code == IssueCode.INVALID_ENUM_VALUE

    def test_suggestion_for_close_value(self):
        issue = s.enum(["english", "german"]).safe_parse("englsh").error.issues[0]
        assert issue.suggestion == "english"
        assert issue.message.endswith("Did you mean 'english'?")

    def test_suggestion_cutoff_from_context(self):
        ctx = ParseContext(suggestion_cutoff=100.0)
        issue = s.enum(["english"]).safe_parse("englsh", ctx).error.issues[0]
        assert "suggestion" not in issue.details


class TestEnumDefinition:
    def test_options_property(self):
        schema = s.enum(["a", "b"])
        assert schema.options == ("a", "b")

    def test_empty_rejected(self):
        with pytest.raises(DefinitionError):
            s.enum([])

    def test_duplicates_rejected(self):
        with pytest.raises(DefinitionError, match="duplicate"):
            s.enum(["a", "a"])

    def test_non_string_values_rejected(self):
        with pytest.raises(DefinitionError):
            s.enum(["a", 1])

    def test_extract(self):
        schema = s.enum(["a", "b", "c"]).extract("c", "a")
        assert schema.options == ("c", "a")
        with pytest.raises(DefinitionError):
            s.enum(["a"]).extract("z")

    def test_exclude(self):
        assert s.enum(["a", "b", "c"]).exclude("b").options == ("a", "c")
