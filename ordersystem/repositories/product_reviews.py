"""
Product review queries.

Reviews are keyed by ``(user_id, product_id)``. ``find_by_id`` and friends
accept a ``ProductReviewId`` or a plain tuple in that order.
"""

from typing import List, Optional

from sqlalchemy import func, select, text
from sqlalchemy.orm import contains_eager

from ordersystem.models import ProductReview
from ordersystem.repositories.base import Repository
from ordersystem.repositories.results import ProductRating, ReviewStatistics


class ProductReviewRepository(Repository):
    model = ProductReview

    # --------------- Derived finders --------------------------------------

    def find_by_user_id(self, user_id: int) -> List[ProductReview]:
        return self._find_by(user_id=user_id)

    def find_by_product_id(self, product_id: int) -> List[ProductReview]:
        return self._find_by(product_id=product_id)

    def find_by_user_id_and_product_id(self, user_id: int,
                                       product_id: int) -> Optional[ProductReview]:
        found = self._find_by(user_id=user_id, product_id=product_id)
        return found[0] if found else None

    def exists_by_user_id_and_product_id(self, user_id: int, product_id: int) -> bool:
        return bool(self._find_by(user_id=user_id, product_id=product_id))

    def find_by_rating_greater_than_equal(self, min_rating: int) -> List[ProductReview]:
        return self._find_by(ProductReview.rating >= min_rating)

    # --------------- Statements -------------------------------------------

    def find_reviews_by_user_using_select(self, user_id: int) -> List[ProductReview]:
        stmt = (
            select(ProductReview)
            .where(ProductReview.user_id == user_id)
            .order_by(ProductReview.product_id)
        )
        return list(self.session.scalars(stmt))

    def find_high_rated_reviews(self, product_id: int, min_rating: int) -> List[ProductReview]:
        stmt = (
            select(ProductReview)
            .where(ProductReview.product_id == product_id, ProductReview.rating >= min_rating)
            .order_by(ProductReview.user_id)
        )
        return list(self.session.scalars(stmt))

    def calculate_average_rating(self, product_id: int) -> Optional[float]:
        stmt = select(func.avg(ProductReview.rating)).where(
            ProductReview.product_id == product_id
        )
        average = self.session.execute(stmt).scalar_one()
        return None if average is None else float(average)

    def find_reviews_with_relationships_by_product(self, product_id: int) -> List[ProductReview]:
        """Reviews with reviewer and product loaded in the same query."""
        stmt = (
            select(ProductReview)
            .join(ProductReview.user)
            .join(ProductReview.product)
            .options(contains_eager(ProductReview.user), contains_eager(ProductReview.product))
            .where(ProductReview.product_id == product_id)
            .order_by(ProductReview.user_id)
        )
        return list(self.session.scalars(stmt))

    # --------------- Native SQL -------------------------------------------

    def find_reviews_by_product_native(self, product_id: int) -> List[ProductReview]:
        return self._native(
            "SELECT * FROM product_reviews WHERE product_id = :product_id ORDER BY user_id",
            product_id=product_id,
        )

    def get_review_statistics(self, product_id: int) -> ReviewStatistics:
        stmt = text(
            "SELECT COUNT(*), AVG(rating), MIN(rating), MAX(rating) "
            "FROM product_reviews WHERE product_id = :product_id"
        )
        count, average, minimum, maximum = self.session.execute(
            stmt, {"product_id": product_id}
        ).one()
        return ReviewStatistics(
            count, None if average is None else float(average), minimum, maximum
        )

    def find_top_rated_products(self, limit: int) -> List[ProductRating]:
        """Best average rating among products with at least three reviews."""
        stmt = text(
            "SELECT p.id, p.name, AVG(pr.rating) AS avg_rating, COUNT(*) AS review_count "
            "FROM product_reviews pr "
            "JOIN products p ON pr.product_id = p.id "
            "GROUP BY p.id, p.name "
            "HAVING COUNT(*) >= 3 "
            "ORDER BY avg_rating DESC, p.id "
            "LIMIT :limit"
        )
        rows = self.session.execute(stmt, {"limit": limit})
        return [
            ProductRating(product_id, name, float(avg_rating), review_count)
            for product_id, name, avg_rating, review_count in rows
        ]
