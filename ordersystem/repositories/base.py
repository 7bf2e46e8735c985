"""
Generic repository — CRUD, specification queries and pagination for one model.

Repositories never commit. They flush so that generated keys and server
defaults are available, and leave the transaction to the caller
(``session_scope`` or the request handler). Integrity errors raised by the
database propagate unchanged.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from sqlalchemy import Numeric, bindparam, func, inspect, select, text
from sqlalchemy.orm import Session

from ordersystem.models import Timestamp
from ordersystem.specifications import Specification

logger = logging.getLogger(__name__)

Money = Numeric(10, 2)


def month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    """Half-open [first day of month, first day of next month) interval."""
    start = datetime(year, month, 1)
    if month == 12:
        return start, datetime(year + 1, 1, 1)
    return start, datetime(year, month + 1, 1)


def month_filter_sql(column: str) -> str:
    return f"{column} >= :start AND {column} < :end"


def datetime_params(*names: str):
    return [bindparam(name, type_=Timestamp) for name in names]


def word_match_sql(column: str, term: str):
    """One LIKE per word of *term*, OR-ed together, plus the parameters."""
    words = [w.lower() for w in term.split()]
    clause = " OR ".join(f"LOWER({column}) LIKE :w{i}" for i in range(len(words)))
    params = {f"w{i}": f"%{w}%" for i, w in enumerate(words)}
    return clause, params


class Repository:
    """Base class; subclasses set ``model``."""

    model: Any = None

    def __init__(self, session: Session):
        self.session = session

    # --------------- Writes -----------------------------------------------

    def save(self, entity):
        """Insert or update *entity* and flush so its key is assigned."""
        self.session.add(entity)
        self.session.flush()
        logger.debug("Saved %r", entity)
        return entity

    def save_all(self, entities: Iterable) -> list:
        entities = list(entities)
        self.session.add_all(entities)
        self.session.flush()
        logger.debug("Saved %d %s rows", len(entities), self.model.__tablename__)
        return entities

    def delete(self, entity):
        self.session.delete(entity)
        self.session.flush()
        logger.debug("Deleted %r", entity)

    def delete_by_id(self, id_):
        entity = self.find_by_id(id_)
        if entity is not None:
            self.delete(entity)

    def flush(self):
        self.session.flush()

    # --------------- Reads ------------------------------------------------

    def find_by_id(self, id_) -> Optional[Any]:
        return self.session.get(self.model, id_)

    def exists_by_id(self, id_) -> bool:
        return self.find_by_id(id_) is not None

    def find_all(self, spec: Optional[Specification] = None, order_by=None) -> List[Any]:
        stmt = self._ordered(self._select(spec), order_by)
        return list(self.session.scalars(stmt))

    def find_one(self, spec: Optional[Specification] = None) -> Optional[Any]:
        stmt = self._ordered(self._select(spec), None).limit(1)
        return self.session.scalars(stmt).first()

    def find_page(self, spec: Optional[Specification] = None, page: int = 1,
                  per_page: int = 20, order_by=None) -> dict:
        """Return one page of matches with paging metadata."""
        total = self.count(spec)
        stmt = (
            self._ordered(self._select(spec), order_by)
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        return {
            "items": list(self.session.scalars(stmt)),
            "page": page,
            "per_page": per_page,
            "total": total,
            "pages": (total + per_page - 1) // per_page,
        }

    def count(self, spec: Optional[Specification] = None) -> int:
        stmt = select(func.count()).select_from(self.model)
        predicate = Specification.where(spec).to_predicate()
        if predicate is not None:
            stmt = stmt.where(predicate)
        return self.session.execute(stmt).scalar_one()

    def exists(self, spec: Optional[Specification] = None) -> bool:
        return self.session.scalar(select(self._select(spec).exists()))

    # --------------- Helpers ----------------------------------------------

    def _select(self, spec: Optional[Specification] = None):
        stmt = select(self.model)
        predicate = Specification.where(spec).to_predicate()
        if predicate is not None:
            stmt = stmt.where(predicate)
        return stmt

    def _ordered(self, stmt, order_by):
        if order_by is None:
            return stmt.order_by(*inspect(self.model).primary_key)
        if not isinstance(order_by, (list, tuple)):
            order_by = (order_by,)
        return stmt.order_by(*order_by)

    def _find_by(self, *criteria, **columns) -> List[Any]:
        """Derived-query helper: equality on ``columns``, extra clauses in ``criteria``."""
        stmt = select(self.model).filter_by(**columns)
        if criteria:
            stmt = stmt.where(*criteria)
        return list(self.session.scalars(self._ordered(stmt, None)))

    def _native(self, sql: str, *bind_types, **params) -> List[Any]:
        """Run raw SQL and map the rows back onto ``model``."""
        clause = text(sql)
        if bind_types:
            clause = clause.bindparams(*bind_types)
        stmt = select(self.model).from_statement(clause)
        return list(self.session.scalars(stmt, params))
