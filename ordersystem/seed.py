"""
Demo dataset shared by the seed migrations and by `seed()`.
"""

import logging

from sqlalchemy.orm import Session

from ordersystem.database import execute, query

logger = logging.getLogger(__name__)


USER_COLUMNS = ("id", "name", "email", "created_at")
USERS = [
    (1, "João Silva", "joao.silva@email.com", "2024-01-15 10:30:00"),
    (2, "Maria Santos", "maria.santos@email.com", "2024-01-16 11:45:00"),
    (3, "Pedro Oliveira", "pedro.oliveira@email.com", "2024-01-17 09:20:00"),
    (4, "Ana Costa", "ana.costa@email.com", "2024-01-18 14:35:00"),
    (5, "Carlos Souza", "carlos.souza@email.com", "2024-02-01 09:30:00"),
    (6, "Juliana Lima", "juliana.lima@email.com", "2024-02-02 11:20:00"),
    (7, "Rafael Pereira", "rafael.pereira@email.com", "2024-03-01 08:45:00"),
    (8, "Fernanda Alves", "fernanda.alves@email.com", "2024-03-02 11:35:00"),
]

PRODUCT_COLUMNS = ("id", "name", "price", "stock", "created_at")
PRODUCTS = [
    (1, "Notebook Dell Inspiron", "3500.00", 15, "2024-01-10 08:00:00"),
    (2, "Smartphone Samsung Galaxy", "4200.00", 30, "2024-01-10 08:00:00"),
    (3, "Mouse Logitech MX", "450.00", 80, "2024-01-10 08:00:00"),
    (4, "Teclado Mecânico Redragon", "960.00", 25, "2024-01-10 08:00:00"),
    (5, "Headphone Sony WH-1000", "450.00", 40, "2024-01-11 08:00:00"),
    (6, "Webcam Logitech C920", "650.00", 0, "2024-01-11 08:00:00"),
    (7, "Tablet Samsung Tab S8", "2800.00", 5, "2024-01-11 08:00:00"),
    (8, "Microfone Blue Yeti", "650.00", 3, "2024-01-12 08:00:00"),
    (9, "Chromecast Google", "350.00", 60, "2024-01-12 08:00:00"),
    (10, "Pen Drive Sandisk 64GB", "45.00", 200, "2024-01-12 08:00:00"),
]

ORDER_COLUMNS = ("id", "total", "status", "user_id", "created_at")
ORDERS = [
    (1, "450.00", "PAID", 1, "2024-02-05 10:00:00"),
    (2, "1190.00", "PAID", 1, "2024-02-10 15:30:00"),
    (3, "3500.00", "CREATED", 2, "2024-02-12 09:10:00"),
    (4, "2800.00", "PAID", 3, "2024-03-03 14:20:00"),
    (5, "960.00", "CANCELLED", 3, "2024-03-08 18:45:00"),
    (6, "1450.00", "PAID", 4, "2024-03-15 11:05:00"),
    (7, "4200.00", "PAID", 5, "2024-04-02 16:40:00"),
    (8, "90.00", "CREATED", 6, "2024-04-10 12:00:00"),
]

ORDER_ITEM_COLUMNS = ("id", "quantity", "subtotal", "product_id", "order_id", "created_at")
ORDER_ITEMS = [
    (1, 1, "450.00", 3, 1, "2024-02-05 10:00:00"),
    (2, 2, "90.00", 10, 2, "2024-02-10 15:30:00"),
    (3, 1, "650.00", 8, 2, "2024-02-10 15:30:00"),
    (4, 1, "450.00", 5, 2, "2024-02-10 15:30:00"),
    (5, 1, "3500.00", 1, 3, "2024-02-12 09:10:00"),
    (6, 1, "2800.00", 7, 4, "2024-03-03 14:20:00"),
    (7, 1, "960.00", 4, 5, "2024-03-08 18:45:00"),
    (8, 1, "450.00", 5, 6, "2024-03-15 11:05:00"),
    (9, 1, "650.00", 6, 6, "2024-03-15 11:05:00"),
    (10, 1, "350.00", 9, 6, "2024-03-15 11:05:00"),
    (11, 1, "4200.00", 2, 7, "2024-04-02 16:40:00"),
    (12, 2, "90.00", 10, 8, "2024-04-10 12:00:00"),
]

PRODUCT_REVIEW_COLUMNS = ("user_id", "product_id", "rating", "comment", "created_at")
PRODUCT_REVIEWS = [
    (1, 3, 5, "Excelente mouse, muito preciso.", "2024-02-08 09:00:00"),
    (2, 3, 4, "Bom, mas a bateria dura menos do que esperava.", "2024-02-20 10:00:00"),
    (4, 3, 5, None, "2024-03-20 17:30:00"),
    (1, 5, 4, "Cancelamento de ruído muito bom.", "2024-02-15 13:00:00"),
    (4, 5, 3, "", "2024-03-21 08:15:00"),
    (6, 5, 5, "Perfeito para trabalhar.", "2024-04-12 19:00:00"),
    (3, 7, 2, "Tela ótima, desempenho fraco.", "2024-03-10 21:10:00"),
    (5, 2, 5, "Melhor celular que já tive.", "2024-04-05 10:25:00"),
]


# insertion order respects the foreign keys
TABLES = [
    ("users", USER_COLUMNS, USERS),
    ("products", PRODUCT_COLUMNS, PRODUCTS),
    ("orders", ORDER_COLUMNS, ORDERS),
    ("order_items", ORDER_ITEM_COLUMNS, ORDER_ITEMS),
    ("product_reviews", PRODUCT_REVIEW_COLUMNS, PRODUCT_REVIEWS),
]


def as_dicts(columns, rows):
    return [dict(zip(columns, row)) for row in rows]


def seed(session: Session) -> int:
    """Insert the demo rows unless the database already has users.

    Migrated databases get the same rows from the seed revisions; this is
    for schemas built straight from the models.
    """
    if query(session, "SELECT id FROM users LIMIT 1", one=True):
        logger.info("Seed skipped: users table is not empty")
        return 0

    inserted = 0
    for table, columns, rows in TABLES:
        sql = (
            f"INSERT INTO {table} ({', '.join(columns)}) "
            f"VALUES ({', '.join(':' + c for c in columns)})"
        )
        inserted += execute(session, sql, as_dicts(columns, rows))
    logger.info("Seeded %d rows", inserted)
    return inserted
