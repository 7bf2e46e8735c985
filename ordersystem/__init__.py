"""
ordersystem — users, products, orders, order items and product reviews
on SQLAlchemy, with a FastAPI front end.
"""

__version__ = "0.1.0"
