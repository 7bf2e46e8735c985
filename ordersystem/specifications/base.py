"""
Composable query predicates.

A ``Specification`` wraps a zero-argument builder that returns a SQLAlchemy
boolean clause, or ``None`` for "no restriction". The builder only runs
when a repository asks for the predicate, so filters can be assembled from
optional request parameters and combined freely::

    spec = products.name_contains(q) & products.price_between(lo, hi)
    repo.find_all(spec)

Combining with ``None`` (or with a specification whose builder returns
``None``) leaves the other side untouched.
"""

from typing import Callable, Optional

from sqlalchemy import and_, not_, or_
from sqlalchemy.sql.elements import ColumnElement

Builder = Callable[[], Optional[ColumnElement]]


class Specification:

    def __init__(self, builder: Builder):
        self._builder = builder

    def to_predicate(self) -> Optional[ColumnElement]:
        return self._builder()

    @classmethod
    def where(cls, spec: Optional["Specification"]) -> "Specification":
        """Wrap a possibly missing specification into one that always exists."""
        if spec is None:
            return cls(lambda: None)
        return spec

    @classmethod
    def all_of(cls, *specs: Optional["Specification"]) -> "Specification":
        result = cls.where(None)
        for spec in specs:
            result = result & spec
        return result

    @classmethod
    def any_of(cls, *specs: Optional["Specification"]) -> "Specification":
        result = cls.where(None)
        for spec in specs:
            result = result | spec
        return result

    def _combine(self, other: Optional["Specification"], op) -> "Specification":
        if other is None:
            return self

        def build():
            left = self.to_predicate()
            right = other.to_predicate()
            if left is None:
                return right
            if right is None:
                return left
            return op(left, right)

        return Specification(build)

    def __and__(self, other):
        return self._combine(other, and_)

    def __or__(self, other):
        return self._combine(other, or_)

    def __invert__(self):
        def build():
            predicate = self.to_predicate()
            return None if predicate is None else not_(predicate)

        return Specification(build)

    def __rand__(self, other):
        return Specification.where(other) & self

    def __ror__(self, other):
        return Specification.where(other) | self
