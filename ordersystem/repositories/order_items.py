"""
Order item queries.
"""

from typing import List, Optional

from sqlalchemy import func, select, text
from sqlalchemy.orm import contains_eager

from ordersystem.models import Order, OrderItem, OrderStatus
from ordersystem.repositories.base import Money, Repository
from ordersystem.repositories.results import ProductQuantity, ProductRevenue


class OrderItemRepository(Repository):
    model = OrderItem

    # --------------- Derived finders --------------------------------------

    def find_by_order_id(self, order_id: int) -> List[OrderItem]:
        return self._find_by(order_id=order_id)

    def find_by_product_id(self, product_id: int) -> List[OrderItem]:
        return self._find_by(product_id=product_id)

    def find_by_quantity_greater_than(self, quantity: int) -> List[OrderItem]:
        return self._find_by(OrderItem.quantity > quantity)

    # --------------- Statements -------------------------------------------

    def find_items_by_order_using_select(self, order_id: int) -> List[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
        return list(self.session.scalars(stmt))

    def find_paid_items_by_user(self, user_id: int) -> List[OrderItem]:
        stmt = (
            select(OrderItem)
            .join(OrderItem.order)
            .where(Order.user_id == user_id, Order.status == OrderStatus.PAID)
            .order_by(OrderItem.id)
        )
        return list(self.session.scalars(stmt))

    def calculate_total_quantity_sold(self, product_id: int) -> Optional[int]:
        """Units of the product across all orders, ``None`` if never ordered."""
        stmt = select(func.sum(OrderItem.quantity)).where(OrderItem.product_id == product_id)
        return self.session.execute(stmt).scalar_one()

    def find_items_with_relationships_by_order(self, order_id: int) -> List[OrderItem]:
        """Items with their product and order loaded in the same query."""
        stmt = (
            select(OrderItem)
            .join(OrderItem.product)
            .join(OrderItem.order)
            .options(contains_eager(OrderItem.product), contains_eager(OrderItem.order))
            .where(Order.id == order_id)
            .order_by(OrderItem.id)
        )
        return list(self.session.scalars(stmt))

    # --------------- Native SQL -------------------------------------------

    def find_items_by_order_native(self, order_id: int) -> List[OrderItem]:
        return self._native(
            "SELECT * FROM order_items WHERE order_id = :order_id ORDER BY id",
            order_id=order_id,
        )

    def find_top_selling_products(self, limit: int) -> List[ProductQuantity]:
        """Best sellers by units in PAID orders."""
        stmt = text(
            "SELECT p.id, p.name, SUM(oi.quantity) AS total_quantity "
            "FROM order_items oi "
            "JOIN products p ON oi.product_id = p.id "
            "JOIN orders o ON oi.order_id = o.id "
            "WHERE o.status = 'PAID' "
            "GROUP BY p.id, p.name "
            "ORDER BY total_quantity DESC, p.id "
            "LIMIT :limit"
        )
        rows = self.session.execute(stmt, {"limit": limit})
        return [ProductQuantity(*row) for row in rows]

    def calculate_revenue_by_product(self) -> List[ProductRevenue]:
        """Sum of subtotals per product over PAID orders, highest first."""
        stmt = text(
            "SELECT p.id, p.name, SUM(oi.subtotal) AS revenue "
            "FROM order_items oi "
            "JOIN products p ON oi.product_id = p.id "
            "JOIN orders o ON oi.order_id = o.id "
            "WHERE o.status = 'PAID' "
            "GROUP BY p.id, p.name "
            "ORDER BY revenue DESC, p.id"
        ).columns(revenue=Money)
        return [ProductRevenue(*row) for row in self.session.execute(stmt)]
