"""Product review predicates."""

from sqlalchemy import and_

from ordersystem.models import ProductReview
from ordersystem.specifications._ranges import contains_ignore_case
from ordersystem.specifications.base import Specification


def by_user(user_id):
    return Specification(lambda: None if user_id is None else ProductReview.user_id == user_id)


def by_product(product_id):
    return Specification(
        lambda: None if product_id is None else ProductReview.product_id == product_id
    )


def rating_greater_than_equal(rating):
    return Specification(lambda: None if rating is None else ProductReview.rating >= rating)


def has_comment():
    return Specification(
        lambda: and_(ProductReview.comment.isnot(None), ProductReview.comment != "")
    )


def comment_contains(text):
    return Specification(lambda: contains_ignore_case(ProductReview.comment, text))
