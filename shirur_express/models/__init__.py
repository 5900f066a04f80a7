# shirur_express/models/__init__.py
from .auth import Token, SignupRequest, UserOut, UserRole, RequestContext
from .booking import (
    BookingStatus,
    BookingCreate,
    BookingOut,
    BookingStatusUpdate,
    OtpVerify,
    BookingCancel
)
from .invoice import SparePart, InvoiceCreate, InvoiceOut
from .order import OrderStatus, OrderItemIn, OrderItem, OrderCreate, OrderOut
from .payment import (
    PaymentTarget,
    IntentStatus,
    CreateGatewayOrderRequest,
    GatewayOrderOut,
    VerifySignatureRequest,
    VerifySignatureOut
)
from .provider import (
    CategoryOut,
    ProblemOut,
    ProviderCreate,
    ProviderUpdate,
    ProviderOut,
    GroceryProductOut
)
from .menu import MenuCategory, MenuItemCreate, MenuItemUpdate, MenuItemOut
from .review import ReviewCreate, ReviewOut
from .rental import PropertyType, Furnishing, RentalPropertyCreate, RentalPropertyOut
from .table_booking import (
    TableBookingStatus,
    TableBookingCreate,
    TableBookingStatusUpdate,
    TableBookingOut
)
from .notification import NotificationOut

__all__ = [
    'Token', 'SignupRequest', 'UserOut', 'UserRole', 'RequestContext',
    'BookingStatus', 'BookingCreate', 'BookingOut', 'BookingStatusUpdate', 'OtpVerify', 'BookingCancel',
    'SparePart', 'InvoiceCreate', 'InvoiceOut',
    'OrderStatus', 'OrderItemIn', 'OrderItem', 'OrderCreate', 'OrderOut',
    'PaymentTarget', 'IntentStatus', 'CreateGatewayOrderRequest', 'GatewayOrderOut',
    'VerifySignatureRequest', 'VerifySignatureOut',
    'CategoryOut', 'ProblemOut', 'ProviderCreate', 'ProviderUpdate', 'ProviderOut', 'GroceryProductOut',
    'MenuCategory', 'MenuItemCreate', 'MenuItemUpdate', 'MenuItemOut',
    'ReviewCreate', 'ReviewOut',
    'PropertyType', 'Furnishing', 'RentalPropertyCreate', 'RentalPropertyOut',
    'TableBookingStatus', 'TableBookingCreate', 'TableBookingStatusUpdate', 'TableBookingOut',
    'NotificationOut'
]
