"""Tests for core.py and context.py -- the shared parse contract."""

import pytest

from wschema import s
from wschema.context import DEFAULT_CONTEXT, ParseContext, Payload
from wschema.core import SafeParseFailure, SafeParseSuccess, build_schema
from wschema.errors import AsyncParseError, DefinitionError, SchemaError
from wschema.models import IssueCode, SchemaDefinition, SchemaType
from wschema.schemas import get_schema_class
from wschema.schemas.string import StringSchema


class TestPayload:
    def test_child_has_empty_path(self):
        parent = Payload({"a": 1}, path=("root",))
        child = parent.child(1)
        assert child.path == ()
        assert child.issues == []

    def test_merge_prefixes_child_issues(self):
        parent = Payload([1, "x"])
        child = parent.child("x")
        child.add_issue(IssueCode.INVALID_TYPE, expected="number")
        assert parent.merge(1, child) is False
        assert parent.issues[0].path == (1,)
        # the child keeps its own, un-prefixed view
        assert child.issues[0].path == ()

    def test_merge_clean_child(self):
        parent = Payload([1])
        assert parent.merge(0, parent.child(1)) is True
        assert parent.ok

    def test_add_issue_defaults_input_to_value(self):
        payload = Payload("z")
        issue = payload.add_issue(IssueCode.CUSTOM)
        assert issue.input == "z"
        other = payload.add_issue(IssueCode.CUSTOM, input=None)
        assert other.input is None


class TestParse:
    def test_returns_value(self):
        assert s.string().parse("hi") == "hi"

    def test_raises_schema_error(self):
        with pytest.raises(SchemaError) as exc_info:
            s.string().parse(3)
        issue = exc_info.value.issues[0]
        assert issue.code == IssueCode.INVALID_TYPE
        assert issue.expected == "string"
        assert issue.received == "integer"
        assert issue.schema == "string"

    def test_accepted_value_round_trips(self):
        schema = s.object({"title": s.string(), "tags": s.array(s.string())})
        value = {"title": "Dune", "tags": ["sf", "classic"]}
        assert schema.parse(value) == value

    def test_default_context(self):
        assert DEFAULT_CONTEXT == ParseContext()


class TestSafeParse:
    def test_success(self):
        result = s.number().safe_parse(2)
        assert isinstance(result, SafeParseSuccess)
        assert result.success is True
        assert result.data == 2

    def test_failure_never_raises(self):
        result = s.number().safe_parse("2")
        assert isinstance(result, SafeParseFailure)
        assert result.success is False
        assert result.error.issues[0].code == IssueCode.INVALID_TYPE

    def test_same_issues_as_parse(self):
        schema = s.object({"a": s.string(), "b": s.number()})
        with pytest.raises(SchemaError) as exc_info:
            schema.parse({"a": 1, "b": "x"})
        result = schema.safe_parse({"a": 1, "b": "x"})
        assert result.error.to_list() == exc_info.value.to_list()

    def test_callback_exception_becomes_custom_issue(self):
        def explode(value):
            raise RuntimeError("kaboom")

        result = s.string().transform(explode).safe_parse("x")
        assert result.success is False
        issue = result.error.issues[0]
        assert issue.code == IssueCode.CUSTOM
        assert issue.message == "kaboom"
        assert issue.exception == "RuntimeError"

    def test_callback_exception_raised_by_parse_as_schema_error(self):
        def explode(value):
            raise RuntimeError("kaboom")

        with pytest.raises(SchemaError) as exc_info:
            s.string().transform(explode).parse("x")
        issue = exc_info.value.issues[0]
        assert issue.code == IssueCode.CUSTOM
        assert issue.message == "kaboom"
        assert issue.exception == "RuntimeError"

    def test_raising_refine_reports_same_issues_both_ways(self):
        def predicate(value):
            raise KeyError("missing")

        schema = s.object({"name": s.string()}).refine(predicate)
        with pytest.raises(SchemaError) as exc_info:
            schema.parse({"name": "x"})
        result = schema.safe_parse({"name": "x"})
        assert result.error.to_list() == exc_info.value.to_list()
        assert exc_info.value.issues[0].exception == "KeyError"

    def test_exception_without_text_uses_type_name(self):
        def explode(value):
            raise ValueError()

        with pytest.raises(SchemaError) as exc_info:
            s.number().transform(explode).parse(1)
        assert exc_info.value.issues[0].message == "ValueError"

    def test_async_refinement_rejected(self):
        async def check(value):
            return True

        with pytest.raises(AsyncParseError):
            s.string().refine(check).safe_parse("x")

    def test_is_valid(self):
        assert s.boolean().is_valid(True)
        assert not s.boolean().is_valid(1)


class TestChecks:
    def test_checks_skipped_after_type_failure(self):
        result = s.string().min(3).email().safe_parse(5)
        assert [i.code for i in result.error.issues] == [IssueCode.INVALID_TYPE]

    def test_checks_aggregate(self):
        result = s.string().min(5).email().safe_parse("ab")
        assert [i.code for i in result.error.issues] == [
            IssueCode.TOO_SMALL,
            IssueCode.INVALID_STRING,
        ]

    def test_abort_early_stops_at_first_check(self):
        result = s.string().min(5).email().safe_parse("ab", ParseContext(abort_early=True))
        assert len(result.error.issues) == 1


class TestMessages:
    def test_schema_message_beats_error_map(self):
        ctx = ParseContext(error_map=lambda issue, default: "from map")
        result = s.string(message="from schema").safe_parse(1, ctx)
        assert result.error.issues[0].message == "from schema"

    def test_error_map_beats_default(self):
        ctx = ParseContext(error_map=lambda issue, default: "from map")
        result = s.string().safe_parse(1, ctx)
        assert result.error.issues[0].message == "from map"

    def test_check_message(self):
        result = s.string().min(3, "Too short").safe_parse("a")
        assert result.error.issues[0].message == "Too short"

    def test_report_input_false(self):
        result = s.string().safe_parse(1, ParseContext(report_input=False))
        assert result.error.issues[0].input is None


class TestComposition:
    def test_builders_return_new_instances(self):
        base = s.string()
        longer = base.min(3)
        assert base is not longer
        assert base.definition.checks == ()
        assert base.parse("a") == "a"

    def test_describe(self):
        schema = s.string().describe("Book title")
        assert schema.description == "Book title"
        assert s.string().description is None

    def test_fluent_wrappers(self):
        assert s.string().optional().parse(None) is None
        assert s.string().nullable().parse(None) is None
        assert s.string().default("x").parse(None) == "x"
        assert s.number().catch(0).parse("nope") == 0
        assert s.string().transform(len).parse("abc") == 3
        assert s.string().pipe(s.string().min(1)).parse("a") == "a"
        assert s.string().or_(s.number()).parse(3) == 3
        assert s.number().array().parse([1, 2]) == [1, 2]

    def test_refine_with_path(self):
        schema = s.object({"password": s.string(), "confirm": s.string()}).refine(
            lambda v: v["password"] == v["confirm"], "Passwords differ", path=["confirm"]
        )
        result = schema.safe_parse({"password": "a", "confirm": "b"})
        issue = result.error.issues[0]
        assert issue.code == IssueCode.CUSTOM
        assert issue.path == ("confirm",)
        assert issue.message == "Passwords differ"

    def test_shared_schema_is_reentrant(self):
        element = s.string()
        schema = s.object({"a": element, "b": element})
        assert schema.safe_parse({"a": 1, "b": "x"}).error.issues[0].path == ("a",)
        assert schema.parse({"a": "y", "b": "x"}) == {"a": "y", "b": "x"}


class TestBuildSchema:
    def test_builds_variant_from_definition(self):
        schema = build_schema(SchemaDefinition(type=SchemaType.STRING))
        assert isinstance(schema, StringSchema)

    @pytest.mark.parametrize("schema_type", list(SchemaType))
    def test_every_tag_registered(self, schema_type):
        assert get_schema_class(schema_type).schema_type == schema_type

    def test_unknown_tag(self):
        with pytest.raises(DefinitionError):
            get_schema_class("tuple")

    def test_type_mismatch_rejected(self):
        with pytest.raises(DefinitionError):
            StringSchema(SchemaDefinition(type=SchemaType.NUMBER))
