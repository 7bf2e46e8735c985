"""Product predicates."""

from ordersystem.models import Product
from ordersystem.specifications._ranges import closed_range, contains_ignore_case
from ordersystem.specifications.base import Specification


def name_contains(name):
    return Specification(lambda: contains_ignore_case(Product.name, name))


def price_greater_than(price):
    return Specification(lambda: None if price is None else Product.price > price)


def price_less_than(price):
    return Specification(lambda: None if price is None else Product.price < price)


def price_between(min_price, max_price):
    return Specification(lambda: closed_range(Product.price, min_price, max_price))


def has_stock():
    return Specification(lambda: Product.stock > 0)


def low_stock(threshold):
    return Specification(lambda: None if threshold is None else Product.stock <= threshold)


def out_of_stock():
    return Specification(lambda: Product.stock == 0)
