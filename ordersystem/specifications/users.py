"""User predicates."""

from ordersystem.models import User
from ordersystem.specifications._ranges import contains_ignore_case, open_range
from ordersystem.specifications.base import Specification


def has_email(email):
    return Specification(lambda: None if email is None else User.email == email)


def name_contains(name):
    return Specification(lambda: contains_ignore_case(User.name, name))


def created_after(date):
    return Specification(lambda: None if date is None else User.created_at > date)


def created_before(date):
    return Specification(lambda: None if date is None else User.created_at < date)


def created_between(start, end):
    return Specification(lambda: open_range(User.created_at, start, end))


def has_orders():
    """Users with at least one order; each user appears once."""
    return Specification(lambda: User._orders.any())
