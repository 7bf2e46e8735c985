"""
Product queries.
"""

from decimal import Decimal
from typing import List

from sqlalchemy import bindparam, func, select, text

from ordersystem.models import Product
from ordersystem.repositories.base import Money, Repository, word_match_sql
from ordersystem.repositories.results import PriceStatistics


class ProductRepository(Repository):
    model = Product

    # --------------- Derived finders --------------------------------------

    def find_by_name_containing(self, name: str) -> List[Product]:
        return self._find_by(Product.name.ilike(f"%{name}%"))

    def find_by_stock_less_than_equal(self, threshold: int) -> List[Product]:
        return self._find_by(Product.stock <= threshold)

    def find_by_price_between(self, min_price, max_price) -> List[Product]:
        return self._find_by(Product.price.between(min_price, max_price))

    # --------------- Statements -------------------------------------------

    def find_available_products(self) -> List[Product]:
        stmt = select(Product).where(Product.stock > 0).order_by(Product.id)
        return list(self.session.scalars(stmt))

    def find_products_more_expensive_than(self, price) -> List[Product]:
        stmt = select(Product).where(Product.price > price).order_by(Product.id)
        return list(self.session.scalars(stmt))

    def find_all_ordered_by_price_desc(self) -> List[Product]:
        stmt = select(Product).order_by(Product.price.desc(), Product.id)
        return list(self.session.scalars(stmt))

    def count_available_products(self) -> int:
        stmt = select(func.count(Product.id)).where(Product.stock > 0)
        return self.session.execute(stmt).scalar_one()

    # --------------- Native SQL -------------------------------------------

    def find_low_stock_products_native(self, threshold: int) -> List[Product]:
        return self._native(
            "SELECT * FROM products WHERE stock <= :threshold ORDER BY stock ASC, id ASC",
            threshold=threshold,
        )

    def calculate_total_inventory_value(self) -> Decimal:
        """Sum of price * stock over every product; zero for an empty catalogue."""
        stmt = text(
            "SELECT COALESCE(SUM(price * stock), 0) AS inventory_value FROM products"
        ).columns(inventory_value=Money)
        return self.session.execute(stmt).scalar_one()

    def get_price_statistics(self, min_price, max_price) -> PriceStatistics:
        stmt = (
            text(
                "SELECT AVG(price) AS average, MIN(price) AS minimum, "
                "MAX(price) AS maximum, COUNT(*) AS count "
                "FROM products WHERE price BETWEEN :min_price AND :max_price"
            )
            .bindparams(
                bindparam("min_price", type_=Money),
                bindparam("max_price", type_=Money),
            )
            .columns(average=Money, minimum=Money, maximum=Money)
        )
        row = self.session.execute(
            stmt, {"min_price": min_price, "max_price": max_price}
        ).one()
        return PriceStatistics(*row)

    def search_products_by_name(self, term: str) -> List[Product]:
        """Any word of *term* appearing in the name, case-insensitive."""
        if not term or not term.split():
            return []
        clause, params = word_match_sql("name", term)
        return self._native(f"SELECT * FROM products WHERE {clause} ORDER BY id", **params)
