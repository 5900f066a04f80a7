# shirur_express/queries/__init__.py
from . import (
    booking_queries,
    catalog_queries,
    invoice_queries,
    notification_queries,
    order_queries,
    payment_queries,
    provider_queries,
    rental_queries,
    review_queries,
    table_booking_queries,
    user_queries
)
from .menu_queries import MenuItemRepository, MENU_REPOSITORIES, get_menu_repository

__all__ = [
    'booking_queries',
    'catalog_queries',
    'invoice_queries',
    'notification_queries',
    'order_queries',
    'payment_queries',
    'provider_queries',
    'rental_queries',
    'review_queries',
    'table_booking_queries',
    'user_queries',
    'MenuItemRepository',
    'MENU_REPOSITORIES',
    'get_menu_repository'
]
