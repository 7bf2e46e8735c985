"""Order predicates."""

from ordersystem.models import Order
from ordersystem.specifications._ranges import closed_range, open_range
from ordersystem.specifications.base import Specification


def by_user(user_id):
    return Specification(lambda: None if user_id is None else Order.user_id == user_id)


def by_status(status):
    return Specification(lambda: None if status is None else Order.status == status)


def created_after(date):
    return Specification(lambda: None if date is None else Order.created_at > date)


def created_before(date):
    return Specification(lambda: None if date is None else Order.created_at < date)


def created_between(start, end):
    return Specification(lambda: open_range(Order.created_at, start, end))


def total_greater_than(total):
    return Specification(lambda: None if total is None else Order.total > total)


def total_less_than(total):
    return Specification(lambda: None if total is None else Order.total < total)


def total_between(min_total, max_total):
    return Specification(lambda: closed_range(Order.total, min_total, max_total))
