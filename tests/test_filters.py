"""Tests for the functional options and filter accumulation."""

from __future__ import annotations

import pytest

from apicalypse.errors import (
    BlankArgumentError,
    MissingInputError,
    NegativeInputError,
    NilOptionError,
    OptionError,
)
from apicalypse.filters import (
    FilterName,
    FilterSet,
    apply_options,
    compose_options,
    exclude,
    fields,
    limit,
    new_filters,
    offset,
    search,
    sort,
    where,
)


class TestFilterSet:
    """Behaviour of the filter accumulator."""

    def test_starts_empty(self):
        assert len(FilterSet()) == 0
        assert FilterSet() == {}

    def test_last_write_wins(self):
        filters = FilterSet()
        filters.set("limit", "10")
        filters.set(FilterName.LIMIT, "20")

        assert filters == {"limit": "20"}

    def test_lookup_by_enum_and_string(self):
        filters = FilterSet({"sort": "rating desc"})

        assert filters[FilterName.SORT] == "rating desc"
        assert filters["sort"] == "rating desc"
        assert "sort" in filters
        assert "where" not in filters

    def test_rejects_unknown_filter_names(self):
        with pytest.raises(ValueError):
            FilterSet().set("order_by", "name")

    def test_as_dict_returns_a_copy(self):
        filters = new_filters(limit(1))
        copy = filters.as_dict()
        copy["limit"] = "99"

        assert filters["limit"] == "1"


@pytest.mark.parametrize(
    ("factory", "key"),
    [(fields, "fields"), (exclude, "exclude")],
)
class TestFieldLists:
    """``fields`` and ``exclude`` share their validation and formatting."""

    @pytest.mark.parametrize(
        ("names", "expected"),
        [
            (("name",), "name"),
            (("name", "popularity", "rating"), "name,popularity,rating"),
            (("name", "release date"), "name,releasedate"),
            ((" parent_game.name ",), "parent_game.name"),
            (("*",), "*"),
        ],
    )
    def test_valid_names(self, factory, key, names, expected):
        filters = FilterSet()
        factory(*names)(filters)

        assert filters[key] == expected

    def test_no_names(self, factory, key):
        filters = FilterSet()
        with pytest.raises(MissingInputError):
            factory()(filters)
        assert key not in filters

    @pytest.mark.parametrize(
        "names",
        [("  ",), ("", " ", "", ""), ("", "id", "  ", "url"), ("id", "\t\n")],
    )
    def test_blank_names(self, factory, key, names):
        filters = FilterSet()
        with pytest.raises(BlankArgumentError):
            factory(*names)(filters)
        assert key not in filters


class TestWhere:
    """Custom predicates."""

    @pytest.mark.parametrize(
        ("predicates", "expected"),
        [
            (("rating = 50",), "rating = 50"),
            (("genres != [Roleplaying, Adventure, MMO]",), "genres != [Roleplaying, Adventure, MMO]"),
            (("genres = {Roleplaying, Adventure, MMO}",), "genres = {Roleplaying, Adventure, MMO}"),
            (
                ("rating > 50", "genres = (RPG, Adventure)"),
                "rating > 50 & genres = (RPG, Adventure)",
            ),
        ],
    )
    def test_predicates_are_joined_verbatim(self, predicates, expected):
        assert new_filters(where(*predicates))["where"] == expected

    def test_no_predicates(self):
        with pytest.raises(MissingInputError):
            new_filters(where())

    @pytest.mark.parametrize("predicates", [("",), (" ",), ("rating > 50", "\r\n")])
    def test_blank_predicates(self, predicates):
        with pytest.raises(BlankArgumentError):
            new_filters(where(*predicates))


@pytest.mark.parametrize(("factory", "key"), [(limit, "limit"), (offset, "offset")])
class TestNumericFilters:
    """``limit`` and ``offset`` accept non-negative integers only."""

    @pytest.mark.parametrize("n", [0, 1, 25, 500])
    def test_non_negative(self, factory, key, n):
        assert new_filters(factory(n))[key] == str(n)

    @pytest.mark.parametrize("n", [-1, -99])
    def test_negative(self, factory, key, n):
        filters = FilterSet()
        with pytest.raises(NegativeInputError) as excinfo:
            factory(n)(filters)
        assert key not in filters
        assert excinfo.value.option == key

    @pytest.mark.parametrize("n", ["10", 1.5, True, None])
    def test_non_integer(self, factory, key, n):
        with pytest.raises(TypeError):
            new_filters(factory(n))


class TestSort:
    """Sorting by a field and order."""

    @pytest.mark.parametrize(
        ("field", "order", "expected"),
        [
            ("popularity", "desc", "popularity desc"),
            ("first_release_date", "asc", "first_release_date asc"),
        ],
    )
    def test_valid(self, field, order, expected):
        assert new_filters(sort(field, order))["sort"] == expected

    @pytest.mark.parametrize(
        ("field", "order"),
        [("", "asc"), ("popularity", ""), (" ", "\t"), ("", "")],
    )
    def test_blank(self, field, order):
        with pytest.raises(BlankArgumentError):
            new_filters(sort(field, order))


class TestSearch:
    """Searching with and without a column."""

    @pytest.mark.parametrize(
        ("column", "term", "expected"),
        [
            ("", "halo", '"halo"'),
            (None, "Zelda", '"Zelda"'),
            ("  ", "halo", '"halo"'),
            ("name", "halo", 'name "halo"'),
            ("name", "The Witcher 3", 'name "The Witcher 3"'),
        ],
    )
    def test_valid(self, column, term, expected):
        assert new_filters(search(column, term))["search"] == expected

    @pytest.mark.parametrize(("column", "term"), [("name", ""), ("", " "), (None, "\n")])
    def test_blank_term(self, column, term):
        with pytest.raises(BlankArgumentError):
            new_filters(search(column, term))


class TestApplyOptions:
    """Applying many options in order."""

    def test_no_options(self):
        assert new_filters() == {}

    def test_multiple_options(self):
        filters = new_filters(limit(15), offset(10), fields("name", "rating"))

        assert filters == {"limit": "15", "offset": "10", "fields": "name,rating"}

    def test_later_option_overwrites_earlier(self):
        filters = new_filters(limit(10), fields("name"), limit(20))

        assert filters == {"limit": "20", "fields": "name"}

    def test_first_error_is_raised(self):
        with pytest.raises(MissingInputError):
            new_filters(fields(), exclude(), where())

    def test_earlier_writes_are_kept_on_failure(self):
        filters = FilterSet()
        with pytest.raises(NegativeInputError):
            apply_options(filters, limit(10), offset(-99), sort("name", "asc"))

        assert filters == {"limit": "10"}

    def test_none_option_aborts_before_anything_is_applied(self):
        filters = FilterSet()
        with pytest.raises(NilOptionError):
            apply_options(filters, limit(10), None)  # type: ignore[arg-type]

        assert filters == {}

    def test_non_callable_option(self):
        with pytest.raises(NilOptionError):
            new_filters("limit 10")  # type: ignore[arg-type]

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            new_filters(limit(-1))
        assert issubclass(NilOptionError, OptionError)


class TestComposeOptions:
    """Composite options behave like their members applied directly."""

    @pytest.mark.parametrize(
        "options",
        [
            [],
            [limit(15)],
            [limit(15), fields("name", "rating")],
            [limit(-99)],
            [limit(-99), fields()],
            [limit(5), offset(-1), sort("name", "asc")],
            [limit(5), None],
        ],
    )
    def test_equivalent_to_direct_application(self, options):
        direct, composed = FilterSet(), FilterSet()
        direct_error = composed_error = None
        try:
            apply_options(direct, *options)
        except (OptionError, TypeError) as exc:
            direct_error = type(exc)
        try:
            apply_options(composed, compose_options(*options))
        except (OptionError, TypeError) as exc:
            composed_error = type(exc)

        assert composed == direct
        assert composed_error is direct_error

    def test_composite_is_reusable(self):
        common = compose_options(fields("name", "rating"), sort("rating", "desc"), limit(25))

        first = new_filters(common)
        second = new_filters(common, offset(25))

        assert first == {"fields": "name,rating", "sort": "rating desc", "limit": "25"}
        assert second == {**first, "offset": "25"}

    def test_nested_composites(self):
        inner = compose_options(limit(1), offset(2))
        outer = compose_options(inner, fields("id"))

        assert new_filters(outer) == {"limit": "1", "offset": "2", "fields": "id"}
