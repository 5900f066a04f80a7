# shirur_express/routes/__init__.py
from .auth import auth_router
from .catalog import catalog_router
from .providers import provider_router
from .menu_items import menu_items_router
from .bookings import bookings_router
from .orders import orders_router
from .payments import payments_router
from .reviews import reviews_router
from .notifications import notifications_router
from .rentals import rentals_router
from .table_bookings import table_bookings_router

routers = [
    auth_router,
    catalog_router,
    provider_router,
    menu_items_router,
    bookings_router,
    orders_router,
    payments_router,
    reviews_router,
    notifications_router,
    rentals_router,
    table_bookings_router
]

__all__ = ["routers"]
