"""Tests for schemas/primitives.py -- boolean, none, unknown, literal, date, instance_of, custom."""

from datetime import date, datetime, timezone

import pytest

from wschema import s
from wschema.errors import AsyncParseError, DefinitionError, SchemaError
from wschema.models import IssueCode


class TestBooleanNoneUnknown:
    def test_boolean(self):
        assert s.boolean().parse(False) is False
        assert not s.boolean().is_valid(0)

    def test_none(self):
        assert s.none().parse(None) is None
        assert s.none().safe_parse("").error.issues[0].expected == "none"

    @pytest.mark.parametrize("value", [None, 1, "x", [1], {"a": object()}])
    def test_unknown_passes_everything(self, value):
        assert s.unknown().parse(value) is value
        assert s.any().parse(value) is value


class TestLiteral:
    def test_exact_match(self):
        assert s.literal("audiobook").parse("audiobook") == "audiobook"

    def test_mismatch(self):
        issue = s.literal("a").safe_parse("b").error.issues[0]
        assert issue.code == IssueCode.INVALID_LITERAL
        assert issue.expected == "a"

    def test_bool_is_not_int(self):
        assert not s.literal(1).is_valid(True)
        assert not s.literal(True).is_valid(1)
        assert not s.literal(1).is_valid(1.0)

    def test_value_property(self):
        assert s.literal(None).value is None


class TestDate:
    def test_datetime_passes(self):
        moment = datetime(2024, 5, 1, 12, 0)
        assert s.date().parse(moment) == moment

    def test_date_widened_to_datetime(self):
        assert s.date().parse(date(2024, 5, 1)) == datetime(2024, 5, 1)

    def test_iso_string(self):
        assert s.date().parse("2024-05-01T10:30:00") == datetime(2024, 5, 1, 10, 30)

    def test_bad_string(self):
        assert s.date().safe_parse("yesterday").error.issues[0].code == IssueCode.INVALID_DATE

    def test_timestamp_needs_coerce(self):
        assert s.date().safe_parse(0).error.issues[0].code == IssueCode.INVALID_TYPE
        assert s.date(coerce=True).parse(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_min_max(self):
        schema = s.date().min(date(2000, 1, 1)).max(date(2030, 1, 1))
        assert schema.is_valid("2024-01-01")
        low = schema.safe_parse("1999-12-31").error.issues[0]
        assert low.code == IssueCode.TOO_SMALL
        assert low.minimum == "2000-01-01T00:00:00"
        assert schema.safe_parse("2031-01-01").error.issues[0].code == IssueCode.TOO_BIG

    def test_aware_value_against_naive_bound(self):
        schema = s.date().min(datetime(2020, 1, 1))
        moment = schema.parse("2024-01-01T00:00:00+00:00")
        assert moment == datetime(2024, 1, 1, tzinfo=timezone.utc)
        low = schema.safe_parse("2019-12-31T23:00:00+00:00").error.issues[0]
        assert low.code == IssueCode.TOO_SMALL
        with pytest.raises(SchemaError):
            schema.parse("2019-12-31T23:00:00+00:00")

    def test_naive_bound_read_as_utc(self):
        # 2020-01-01T00:30+01:00 is 2019-12-31T23:30Z
        schema = s.date().min(datetime(2020, 1, 1))
        assert not schema.is_valid("2020-01-01T00:30:00+01:00")

    def test_naive_value_against_aware_bound(self):
        schema = s.date().max(datetime(2030, 1, 1, tzinfo=timezone.utc))
        assert schema.parse(date(2024, 1, 1)) == datetime(2024, 1, 1)
        with pytest.raises(SchemaError) as exc_info:
            schema.parse("2031-06-01T12:00:00")
        assert exc_info.value.issues[0].code == IssueCode.TOO_BIG

    @pytest.mark.parametrize("bound", ["2020-01-01", 1577836800, None])
    def test_bound_must_be_date(self, bound):
        with pytest.raises(DefinitionError):
            s.date().min(bound)
        with pytest.raises(DefinitionError):
            s.date().max(bound)


class TestInstanceOf:
    def test_instances(self):
        class Book:
            pass

        schema = s.instance_of(Book)
        book = Book()
        assert schema.parse(book) is book
        issue = schema.safe_parse("Book").error.issues[0]
        assert issue.expected == "Book"

    def test_requires_class(self):
        with pytest.raises(DefinitionError):
            s.instance_of("Book")


class TestCustom:
    def test_predicate(self):
        even = s.custom(lambda v: isinstance(v, int) and v % 2 == 0, "Must be even")
        assert even.parse(4) == 4
        issue = even.safe_parse(3).error.issues[0]
        assert issue.code == IssueCode.CUSTOM
        assert issue.message == "Must be even"

    def test_no_predicate_accepts_anything(self):
        assert s.custom().is_valid(object())

    def test_async_predicate_rejected(self):
        async def check(value):
            return True

        with pytest.raises(AsyncParseError):
            s.custom(check).parse(1)
