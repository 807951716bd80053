from decimal import Decimal

import pytest

from app.config import settings
from app.core.exceptions import InvalidInput
from app.services.return_authorization_query import (
    Predicate,
    QueryTranslator,
    ReturnAuthorizationQuery,
    SortOrder,
)


translator = QueryTranslator()


def test_defaults():
    query = translator.translate({})

    assert query.predicates == []
    assert query.sort is None
    assert query.page == 1
    assert query.per_page == settings.DEFAULT_PER_PAGE


def test_reason_contains():
    query = translator.translate({"reason_cont": "damage"})
    assert query.predicates == [Predicate("reason", "cont", "damage")]


def test_longest_predicate_wins():
    query = translator.translate({"amount_gteq": "10", "amount_lteq": "20.50"})
    assert query.predicates == [
        Predicate("amount", "gteq", Decimal("10")),
        Predicate("amount", "lteq", Decimal("20.50")),
    ]


def test_blank_values_are_ignored():
    assert translator.translate({"reason_cont": ""}).predicates == []


def test_sort():
    assert translator.translate({"s": "amount desc"}).sort == SortOrder("amount", descending=True)
    assert translator.translate({"s": "number"}).sort == SortOrder("number", descending=False)


def test_paging():
    query = translator.translate({}, page="3", per_page="10")

    assert query.page == 3
    assert query.per_page == 10
    assert query.offset == 20


def test_per_page_is_capped():
    assert translator.translate({}, per_page="100000").per_page == settings.MAX_PER_PAGE


@pytest.mark.parametrize("q", [
    {"foo_cont": "x"},
    {"reason_like": "x"},
    {"reason": "x"},
    {"state_cont": "auth"},
    {"state_eq": "pending"},
    {"amount_eq": "ten"},
    {"amount_gt": "NaN"},
    {"amount_lt": "Infinity"},
    {"s": "id desc"},
    {"s": "amount sideways"},
])
def test_invalid_search_params(q):
    with pytest.raises(InvalidInput):
        translator.translate(q)


@pytest.mark.parametrize("page,per_page", [("0", None), ("-1", None), (None, "0"), ("x", None), (None, "1.5")])
def test_invalid_paging(page, per_page):
    with pytest.raises(InvalidInput):
        translator.translate({}, page=page, per_page=per_page)


@pytest.mark.parametrize("total,pages", [(0, 0), (1, 1), (2, 1), (25, 1), (26, 2)])
def test_pages_for(total, pages):
    assert ReturnAuthorizationQuery(per_page=25).pages_for(total) == pages
    assert ReturnAuthorizationQuery(per_page=1).pages_for(total) == total


def test_contains_clause_escapes_wildcards():
    clause = QueryTranslator.clause(Predicate("reason", "cont", "50%_off"))
    compiled = str(clause.compile(compile_kwargs={"literal_binds": True}))
    assert "ESCAPE" in compiled
