"""Filter accumulation for Apicalypse queries.

Filters are set through functional options: each factory (``fields``,
``limit``, ...) captures its arguments and returns a callable that validates
them and writes a single entry into a :class:`FilterSet` when applied.
Options are applied in the order given and the first failure aborts the
build. For the syntax accepted by each filter see https://apicalypse.io/syntax/
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from enum import Enum

from apicalypse.errors import (
    BlankArgumentError,
    MissingInputError,
    NegativeInputError,
    NilOptionError,
)
from apicalypse.whitespace import is_blank, remove_whitespace


class FilterName(str, Enum):
    """Filters understood by the query language."""

    FIELDS = "fields"
    EXCLUDE = "exclude"
    WHERE = "where"
    LIMIT = "limit"
    OFFSET = "offset"
    SORT = "sort"
    SEARCH = "search"


class FilterSet(Mapping[str, str]):
    """Mutable accumulator mapping filter names to formatted values.

    Setting a filter that is already present replaces its value.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._filters: dict[str, str] = {}
        if initial:
            for name, value in initial.items():
                self.set(name, value)

    def set(self, name: FilterName | str, value: str) -> None:
        key = FilterName(name).value
        self._filters[key] = value

    def __getitem__(self, key: str) -> str:
        if isinstance(key, FilterName):
            key = key.value
        return self._filters[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"FilterSet({self._filters!r})"

    def as_dict(self) -> dict[str, str]:
        return dict(self._filters)


FuncOption = Callable[[FilterSet], None]


def _ensure_options(options: tuple[FuncOption | None, ...]) -> None:
    for position, option in enumerate(options):
        if option is None or not callable(option):
            raise NilOptionError(f"option at position {position} is missing or not callable")


def apply_options(filter_set: FilterSet, *options: FuncOption) -> FilterSet:
    """Apply ``options`` to ``filter_set`` in order and return the set.

    Every option is checked before any is applied. The first option that
    fails stops the build; filters written by earlier options stay in the set.
    """

    _ensure_options(options)
    for option in options:
        option(filter_set)
    return filter_set


def new_filters(*options: FuncOption) -> FilterSet:
    """Return a fresh :class:`FilterSet` populated by ``options``."""

    return apply_options(FilterSet(), *options)


def compose_options(*options: FuncOption) -> FuncOption:
    """Compose multiple options into a single reusable option.

    The composite applies its members in order exactly as if they had been
    passed to :func:`apply_options` directly.
    """

    def composite(filter_set: FilterSet) -> None:
        apply_options(filter_set, *options)

    return composite


def _joined_names(name: FilterName, values: tuple[str, ...]) -> str:
    if not values:
        raise MissingInputError(option=name.value)
    for value in values:
        if is_blank(value):
            raise BlankArgumentError(option=name.value)
    return remove_whitespace(",".join(values))


def fields(*names: str) -> FuncOption:
    """Select the fields included in the results of a query."""

    def option(filter_set: FilterSet) -> None:
        filter_set.set(FilterName.FIELDS, _joined_names(FilterName.FIELDS, names))

    return option


def exclude(*names: str) -> FuncOption:
    """Select the fields excluded from the results of a query."""

    def option(filter_set: FilterSet) -> None:
        filter_set.set(FilterName.EXCLUDE, _joined_names(FilterName.EXCLUDE, names))

    return option


def where(*predicates: str) -> FuncOption:
    """Filter results with custom predicates, AND'd together when several are given.

    Predicates are passed through verbatim, e.g. ``"rating >= 80"`` or
    ``"genres = (Roleplaying, Adventure)"``.
    """

    def option(filter_set: FilterSet) -> None:
        if not predicates:
            raise MissingInputError(option=FilterName.WHERE.value)
        for predicate in predicates:
            if is_blank(predicate):
                raise BlankArgumentError(option=FilterName.WHERE.value)
        filter_set.set(FilterName.WHERE, " & ".join(predicates))

    return option


def _non_negative(name: FilterName, n: int) -> str:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"{name.value} expects an integer, got {type(n).__name__}")
    if n < 0:
        raise NegativeInputError(option=name.value)
    return str(n)


def limit(n: int) -> FuncOption:
    """Set the maximum number of items returned. APIs usually cap this value."""

    def option(filter_set: FilterSet) -> None:
        filter_set.set(FilterName.LIMIT, _non_negative(FilterName.LIMIT, n))

    return option


def offset(n: int) -> FuncOption:
    """Set the index of the first item returned."""

    def option(filter_set: FilterSet) -> None:
        filter_set.set(FilterName.OFFSET, _non_negative(FilterName.OFFSET, n))

    return option


def sort(field: str, order: str) -> FuncOption:
    """Sort results by ``field`` in ``order`` (``"asc"`` or ``"desc"``)."""

    def option(filter_set: FilterSet) -> None:
        if is_blank(field) or is_blank(order):
            raise BlankArgumentError(option=FilterName.SORT.value)
        filter_set.set(FilterName.SORT, f"{field} {order}")

    return option


def search(column: str | None, term: str) -> FuncOption:
    """Search for ``term``, in ``column`` or in the default column when it is blank."""

    def option(filter_set: FilterSet) -> None:
        if is_blank(term):
            raise BlankArgumentError(option=FilterName.SEARCH.value)
        quoted = f'"{term}"'
        if not is_blank(column):
            quoted = f"{column} {quoted}"
        filter_set.set(FilterName.SEARCH, quoted)

    return option


__all__ = [
    "FilterName",
    "FilterSet",
    "FuncOption",
    "apply_options",
    "compose_options",
    "exclude",
    "fields",
    "limit",
    "new_filters",
    "offset",
    "search",
    "sort",
    "where",
]
