"""
Query translation for return authorization listings.

Turns ransack-style ``q[<field>_<predicate>]`` parameters, a ``q[s]``
sort and page / per_page into SQLAlchemy clauses.
"""
import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import Select

from app.config import settings
from app.core.exceptions import InvalidInput
from app.models.legacy_return_authorization import LegacyReturnAuthorization
from app.services.return_authorization_state_machine import ReturnAuthorizationState


# field -> allowed predicates
FILTERABLE_FIELDS: Dict[str, tuple] = {
    "reason": ("cont", "eq", "start", "end"),
    "number": ("cont", "eq"),
    "state": ("eq",),
    "amount": ("eq", "gt", "gteq", "lt", "lteq"),
}

SORTABLE_FIELDS = ("number", "reason", "amount", "state", "created_at")

# Longest first so "gteq" is not read as "eq"
PREDICATES = sorted({p for preds in FILTERABLE_FIELDS.values() for p in preds}, key=len, reverse=True)

SORT_KEY = "s"


@dataclass(frozen=True)
class Predicate:
    field: str
    operator: str
    value: Any


@dataclass(frozen=True)
class SortOrder:
    field: str
    descending: bool = False


@dataclass
class ReturnAuthorizationQuery:
    """Store-level query: filters, ordering and a page window."""
    predicates: List[Predicate] = field(default_factory=list)
    sort: Optional[SortOrder] = None
    page: int = 1
    per_page: int = settings.DEFAULT_PER_PAGE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def pages_for(self, total_count: int) -> int:
        return math.ceil(total_count / self.per_page) if total_count else 0


class QueryTranslator:
    """Validates listing parameters and applies them to a select()."""

    def translate(
        self,
        q: Mapping[str, str],
        page: Optional[str] = None,
        per_page: Optional[str] = None,
    ) -> ReturnAuthorizationQuery:
        """
        Build a query from raw request parameters.

        Raises:
            InvalidInput: unknown field or predicate, bad value, bad paging
        """
        predicates = []
        sort = None
        for key, raw_value in q.items():
            if key == SORT_KEY:
                sort = self.parse_sort(raw_value)
                continue
            field_name, operator = self.parse_key(key)
            if raw_value is None or raw_value == "":
                # Blank values are ignored, matching ransack
                continue
            predicates.append(Predicate(field_name, operator, self.coerce(field_name, raw_value)))

        return ReturnAuthorizationQuery(
            predicates=predicates,
            sort=sort,
            page=self.parse_positive_int("page", page, default=1),
            per_page=min(
                self.parse_positive_int("per_page", per_page, default=settings.DEFAULT_PER_PAGE),
                settings.MAX_PER_PAGE,
            ),
        )

    def parse_key(self, key: str) -> tuple:
        for operator in PREDICATES:
            suffix = f"_{operator}"
            if key.endswith(suffix):
                field_name = key[: -len(suffix)]
                if field_name not in FILTERABLE_FIELDS:
                    raise InvalidInput(f"Unknown filter field '{field_name}'", details={"key": key})
                if operator not in FILTERABLE_FIELDS[field_name]:
                    raise InvalidInput(
                        f"Predicate '{operator}' is not supported for '{field_name}'",
                        details={"key": key},
                    )
                return field_name, operator
        raise InvalidInput(f"Unknown filter '{key}'", details={"key": key})

    def parse_sort(self, raw: str) -> SortOrder:
        parts = (raw or "").split()
        if not parts or len(parts) > 2 or parts[0] not in SORTABLE_FIELDS:
            raise InvalidInput(f"Invalid sort '{raw}'", details={"sortable": list(SORTABLE_FIELDS)})
        direction = parts[1].lower() if len(parts) == 2 else "asc"
        if direction not in ("asc", "desc"):
            raise InvalidInput(f"Invalid sort direction '{parts[1]}'")
        return SortOrder(parts[0], descending=direction == "desc")

    def coerce(self, field_name: str, raw: str) -> Any:
        if field_name == "amount":
            try:
                value = Decimal(str(raw))
            except InvalidOperation:
                raise InvalidInput(f"Invalid amount '{raw}'")
            if not value.is_finite():
                raise InvalidInput(f"Invalid amount '{raw}'")
            return value
        if field_name == "state":
            valid = [s.value for s in ReturnAuthorizationState]
            if raw not in valid:
                raise InvalidInput(f"Invalid state '{raw}'", details={"states": valid})
        return raw

    @staticmethod
    def parse_positive_int(name: str, raw: Optional[str], default: int) -> int:
        if raw is None or raw == "":
            return default
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise InvalidInput(f"'{name}' must be an integer")
        if value < 1:
            raise InvalidInput(f"'{name}' must be at least 1")
        return value

    # -------------------------------------------------------------------------
    # SQL
    # -------------------------------------------------------------------------

    def apply_filters(self, stmt: Select, query: ReturnAuthorizationQuery) -> Select:
        for predicate in query.predicates:
            stmt = stmt.where(self.clause(predicate))
        return stmt

    def apply_ordering(self, stmt: Select, query: ReturnAuthorizationQuery) -> Select:
        model = LegacyReturnAuthorization
        if query.sort:
            column = getattr(model, query.sort.field)
            stmt = stmt.order_by(column.desc() if query.sort.descending else column.asc())
        # Insertion order, also the tiebreaker for explicit sorts
        return stmt.order_by(model.created_at.asc(), model.number.asc())

    def apply_page(self, stmt: Select, query: ReturnAuthorizationQuery) -> Select:
        return stmt.offset(query.offset).limit(query.per_page)

    @staticmethod
    def clause(predicate: Predicate):
        column = getattr(LegacyReturnAuthorization, predicate.field)
        value = predicate.value
        if predicate.operator == "cont":
            return column.contains(value, autoescape=True)
        if predicate.operator == "start":
            return column.startswith(value, autoescape=True)
        if predicate.operator == "end":
            return column.endswith(value, autoescape=True)
        if predicate.operator == "eq":
            return column == value
        if predicate.operator == "gt":
            return column > value
        if predicate.operator == "gteq":
            return column >= value
        if predicate.operator == "lt":
            return column < value
        if predicate.operator == "lteq":
            return column <= value
        raise InvalidInput(f"Unsupported predicate '{predicate.operator}'")
