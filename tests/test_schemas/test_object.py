"""Tests for schemas/object.py."""

import pytest

from wschema import ParseContext, s
from wschema.errors import DefinitionError
from wschema.models import IssueCode, UnknownKeys


@pytest.fixture
def book():
    return s.object({
        "title": s.string(),
        "year": s.integer(),
        "language": s.enum(["en", "de"]).optional(),
        "genre": s.string().default("Audiobook"),
    })


class TestParse:
    def test_valid(self, book):
        assert book.parse({"title": "Dune", "year": 1965, "language": "en"}) == {
            "title": "Dune",
            "year": 1965,
            "language": "en",
            "genre": "Audiobook",
        }

    def test_optional_field_stays_absent(self, book):
        assert "language" not in book.parse({"title": "Dune", "year": 1965})

    def test_missing_required_field(self, book):
        issue = book.safe_parse({"year": 1965}).error.issues[0]
        assert issue.code == IssueCode.INVALID_TYPE
        assert issue.path == ("title",)
        assert issue.expected == "string"
        assert issue.received == "missing"
        assert issue.message == "Invalid input: expected string, received missing"

    def test_every_field_reported(self, book):
        result = book.safe_parse({"title": 1, "year": "x", "language": "fr"})
        assert [i.path for i in result.error.issues] == [("title",), ("year",), ("language",)]

    def test_abort_early(self, book):
        result = book.safe_parse({"title": 1, "year": "x"}, ParseContext(abort_early=True))
        assert len(result.error.issues) == 1

    def test_non_mapping(self, book):
        issue = book.safe_parse(["Dune"]).error.issues[0]
        assert issue.expected == "object"
        assert issue.received == "list"

    def test_nullable_field_must_be_present(self):
        schema = s.object({"cover": s.string().nullable()})
        assert schema.parse({"cover": None}) == {"cover": None}
        assert not schema.is_valid({})

    def test_field_message_used_for_missing_key(self):
        schema = s.object({"title": s.string(message="Title is required")})
        assert schema.safe_parse({}).error.issues[0].message == "Title is required"

    def test_callable_default_is_fresh(self):
        schema = s.object({"tags": s.array(s.string()).default(list)})
        first = schema.parse({})
        first["tags"].append("x")
        assert schema.parse({}) == {"tags": []}


class TestUnknownKeys:
    def test_strip_is_default(self, book):
        assert "extra" not in book.parse({"title": "Dune", "year": 1965, "extra": 1})

    def test_passthrough(self, book):
        parsed = book.passthrough().parse({"title": "Dune", "year": 1965, "extra": 1})
        assert parsed["extra"] == 1

    def test_strict(self, book):
        result = book.strict().safe_parse({"title": "Dune", "year": 1965, "zz": 1, "aa": 2})
        issue = result.error.issues[0]
        assert issue.code == IssueCode.UNRECOGNIZED_KEYS
        assert issue.keys == ["aa", "zz"]

    def test_strict_suggests_declared_key(self, book):
        result = book.strict().safe_parse({"title": "Dune", "year": 1965, "langauge": "en"})
        assert result.error.issues[0].suggestion == "language"

    def test_policy_by_name(self):
        schema = s.object({}, unknown_keys="strict")
        assert schema.unknown_keys == UnknownKeys.STRICT
        assert schema.strip().unknown_keys == UnknownKeys.STRIP

    def test_bad_policy(self):
        with pytest.raises(DefinitionError):
            s.object({}, unknown_keys="loose")


class TestShapeComposition:
    def test_shape_is_read_only(self, book):
        with pytest.raises(TypeError):
            book.shape["title"] = s.number()

    def test_extend(self, book):
        extended = book.extend({"narrator": s.string()})
        assert list(extended.shape) == ["title", "year", "language", "genre", "narrator"]
        assert "narrator" not in book.shape

    def test_merge_takes_other_policy(self, book):
        merged = book.merge(s.object({"isbn": s.string()}).strict())
        assert "isbn" in merged.shape
        assert merged.unknown_keys == UnknownKeys.STRICT

    def test_pick_and_omit(self, book):
        assert list(book.pick("year", "title").shape) == ["title", "year"]
        assert list(book.omit("genre").shape) == ["title", "year", "language"]
        with pytest.raises(DefinitionError):
            book.pick("isbn")

    def test_partial(self, book):
        assert book.partial().parse({}) == {"genre": "Audiobook"}
        only_year = book.partial("year")
        assert not only_year.is_valid({})
        assert only_year.is_valid({"title": "Dune"})

    def test_required(self, book):
        strict_lang = book.required("language")
        assert not strict_lang.is_valid({"title": "Dune", "year": 1965})

    def test_keyof(self, book):
        assert book.keyof().options == ("title", "year", "language", "genre")

    def test_field_must_be_schema(self):
        with pytest.raises(DefinitionError):
            s.object({"title": str})
