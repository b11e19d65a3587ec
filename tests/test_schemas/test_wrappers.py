"""Tests for schemas/wrappers.py."""

import pytest

from wschema import s
from wschema.errors import DefinitionError
from wschema.models import IssueCode


class TestOptionalNullable:
    def test_optional(self):
        schema = s.string().optional()
        assert schema.parse(None) is None
        assert schema.parse("a") == "a"
        assert not schema.is_valid(1)

    def test_unwrap(self):
        inner = s.string()
        assert s.optional(inner).unwrap() is inner
        assert s.nullable(inner).unwrap() is inner

    def test_accepts_missing(self):
        assert s.string().optional().accepts_missing
        assert not s.string().nullable().accepts_missing
        assert s.string().optional().nullable().accepts_missing


class TestDefault:
    def test_substitutes_none(self):
        assert s.string().default("Audiobook").parse(None) == "Audiobook"

    def test_keeps_given_value(self):
        assert s.string().default("Audiobook").parse("Fiction") == "Fiction"

    def test_default_is_validated(self):
        result = s.string().min(3).default("ab").safe_parse(None)
        assert result.error.issues[0].code == IssueCode.TOO_SMALL

    def test_callable_default(self):
        assert s.array(s.string()).default(list).parse(None) == []

    def test_remove_default(self):
        inner = s.string()
        assert s.default(inner, "x").remove_default() is inner


class TestCatch:
    def test_fallback_on_failure(self):
        assert s.number().catch(0).parse("x") == 0

    def test_value_on_success(self):
        assert s.number().catch(0).parse(5) == 5

    def test_callable_fallback(self):
        assert s.array(s.number()).catch(list).parse("x") == []


class TestRefine:
    def test_custom_issue(self):
        schema = s.number().refine(lambda n: n % 2 == 0, "Must be even")
        assert schema.parse(2) == 2
        issue = schema.safe_parse(3).error.issues[0]
        assert issue.code == IssueCode.CUSTOM
        assert issue.message == "Must be even"
        assert issue.schema == "refine"

    def test_not_run_when_inner_fails(self):
        calls = []
        schema = s.number().refine(lambda n: calls.append(n) or True)
        schema.safe_parse("x")
        assert calls == []

    def test_predicate_must_be_callable(self):
        with pytest.raises(DefinitionError):
            s.refine(s.number(), "even")


class TestTransformPipe:
    def test_transform(self):
        assert s.string().transform(lambda v: v.split(",")).parse("a,b") == ["a", "b"]

    def test_transform_skipped_on_failure(self):
        assert s.string().transform(len).safe_parse(1).error.issues[0].code == IssueCode.INVALID_TYPE

    def test_pipe(self):
        schema = s.string().transform(len).pipe(s.number().max(3))
        assert schema.parse("abc") == 3
        assert schema.safe_parse("abcd").error.issues[0].code == IssueCode.TOO_BIG

    def test_pipe_properties(self):
        source, target = s.string(), s.number()
        piped = s.pipe(source, target)
        assert piped.source is source
        assert piped.target is target


class TestLazy:
    def test_recursive_shape(self):
        node = s.lazy(lambda: s.object({"name": s.string(), "children": s.array(node).optional()}))
        tree = {"name": "root", "children": [{"name": "a"}, {"name": "b", "children": []}]}
        assert node.parse(tree) == tree

    def test_recursive_error_path(self):
        node = s.lazy(lambda: s.object({"name": s.string(), "children": s.array(node).optional()}))
        result = node.safe_parse({"name": "root", "children": [{"name": 1}]})
        assert result.error.issues[0].path == ("children", 0, "name")

    def test_factory_called_once(self):
        calls = []

        def factory():
            calls.append(1)
            return s.string()

        schema = s.lazy(factory)
        schema.parse("a")
        schema.parse("b")
        assert calls == [1]

    def test_factory_must_return_schema(self):
        with pytest.raises(DefinitionError):
            s.lazy(lambda: "string").parse("a")
