"""
Order queries.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select, text
from sqlalchemy.orm import contains_eager

from ordersystem.models import Order, OrderItem, OrderStatus
from ordersystem.repositories.base import (
    Money,
    Repository,
    datetime_params,
    month_bounds,
    month_filter_sql,
)
from ordersystem.repositories.results import SalesStatistics, StatusCount, UserSales


class OrderRepository(Repository):
    model = Order

    # --------------- Derived finders --------------------------------------

    def find_by_user_id(self, user_id: int) -> List[Order]:
        return self._find_by(user_id=user_id)

    def find_by_status(self, status: OrderStatus) -> List[Order]:
        return self._find_by(status=status)

    def find_by_user_id_and_status(self, user_id: int, status: OrderStatus) -> List[Order]:
        return self._find_by(user_id=user_id, status=status)

    def find_by_total_greater_than(self, total) -> List[Order]:
        return self._find_by(Order.total > total)

    # --------------- Statements -------------------------------------------

    def find_by_user_id_and_status_using_select(self, user_id: int,
                                                status: OrderStatus) -> List[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id, Order.status == status)
            .order_by(Order.id)
        )
        return list(self.session.scalars(stmt))

    def find_orders_by_date_range(self, start_date, end_date) -> List[Order]:
        """Orders created within [start_date, end_date], both ends inclusive."""
        stmt = (
            select(Order)
            .where(Order.created_at.between(start_date, end_date))
            .order_by(Order.id)
        )
        return list(self.session.scalars(stmt))

    def find_orders_with_items_by_user_id(self, user_id: int) -> List[Order]:
        """
        The user's orders with their items fetched in the same query.
        Inner join: orders without items are left out.
        """
        stmt = (
            select(Order)
            .join(Order._items)
            .options(contains_eager(Order._items))
            .where(Order.user_id == user_id)
            .order_by(Order.id, OrderItem.id)
        )
        return list(self.session.scalars(stmt).unique())

    def calculate_total_sales_by_user(self, user_id: int) -> Optional[Decimal]:
        """Sum of the user's PAID order totals, ``None`` if there are none."""
        stmt = select(func.sum(Order.total)).where(
            Order.user_id == user_id, Order.status == OrderStatus.PAID
        )
        return self.session.execute(stmt).scalar_one()

    # --------------- Native SQL -------------------------------------------

    def find_orders_by_month_and_year(self, month: int, year: int) -> List[Order]:
        start, end = month_bounds(month, year)
        return self._native(
            f"SELECT * FROM orders WHERE {month_filter_sql('created_at')} ORDER BY id",
            *datetime_params("start", "end"),
            start=start,
            end=end,
        )

    def count_orders_by_status(self) -> List[StatusCount]:
        rows = self.session.execute(
            text("SELECT status, COUNT(*) AS count FROM orders GROUP BY status ORDER BY status")
        )
        return [StatusCount(OrderStatus(status), count) for status, count in rows]

    def get_sales_statistics(self, start_date, end_date) -> SalesStatistics:
        """Count, sum, average, min and max of PAID order totals in the window."""
        stmt = (
            text(
                "SELECT COUNT(*) AS count, SUM(total) AS total, AVG(total) AS average, "
                "MIN(total) AS minimum, MAX(total) AS maximum "
                "FROM orders "
                "WHERE created_at BETWEEN :start AND :end AND status = 'PAID'"
            )
            .bindparams(*datetime_params("start", "end"))
            .columns(total=Money, average=Money, minimum=Money, maximum=Money)
        )
        row = self.session.execute(stmt, {"start": start_date, "end": end_date}).one()
        return SalesStatistics(*row)

    def find_top_users_by_sales(self, limit: int) -> List[UserSales]:
        stmt = (
            text(
                "SELECT u.id AS user_id, u.name AS name, SUM(o.total) AS total_sales "
                "FROM orders o "
                "JOIN users u ON o.user_id = u.id "
                "WHERE o.status = 'PAID' "
                "GROUP BY u.id, u.name "
                "ORDER BY total_sales DESC, u.id "
                "LIMIT :limit"
            )
            .columns(total_sales=Money)
        )
        return [UserSales(*row) for row in self.session.execute(stmt, {"limit": limit})]
