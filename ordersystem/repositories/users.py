"""
User queries.
"""

from typing import List, Optional

from sqlalchemy import select, text
from sqlalchemy.orm import contains_eager

from ordersystem.models import Order, User
from ordersystem.repositories.base import (
    Repository,
    datetime_params,
    month_bounds,
    month_filter_sql,
    word_match_sql,
)


class UserRepository(Repository):
    model = User

    # --------------- Derived finders --------------------------------------

    def find_by_email(self, email: str) -> Optional[User]:
        found = self._find_by(email=email)
        return found[0] if found else None

    def exists_by_email(self, email: str) -> bool:
        return bool(self._find_by(email=email))

    def find_by_name_containing(self, name: str) -> List[User]:
        """Case-insensitive substring match."""
        return self._find_by(User.name.ilike(f"%{name}%"))

    # --------------- Statements -------------------------------------------

    def find_by_email_using_select(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return self.session.scalars(stmt).one_or_none()

    def find_users_created_after(self, date) -> List[User]:
        stmt = select(User).where(User.created_at > date).order_by(User.id)
        return list(self.session.scalars(stmt))

    def find_users_with_orders(self) -> List[User]:
        """Distinct users having orders, with the orders already loaded."""
        stmt = (
            select(User)
            .join(User._orders)
            .options(contains_eager(User._orders))
            .order_by(User.id, Order.id)
        )
        return list(self.session.scalars(stmt).unique())

    # --------------- Native SQL -------------------------------------------

    def find_by_email_native(self, email: str) -> Optional[User]:
        found = self._native("SELECT * FROM users WHERE email = :email", email=email)
        return found[0] if found else None

    def count_users_by_month_and_year(self, month: int, year: int) -> int:
        start, end = month_bounds(month, year)
        stmt = text(
            f"SELECT COUNT(*) FROM users WHERE {month_filter_sql('created_at')}"
        ).bindparams(*datetime_params("start", "end"))
        return self.session.execute(stmt, {"start": start, "end": end}).scalar_one()

    def search_users_by_name(self, term: str) -> List[User]:
        """Any word of *term* appearing in the name, case-insensitive."""
        if not term or not term.split():
            return []
        clause, params = word_match_sql("name", term)
        return self._native(f"SELECT * FROM users WHERE {clause} ORDER BY id", **params)
