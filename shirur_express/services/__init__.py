# shirur_express/services/__init__.py
from . import booking_machine, booking_service, order_service, reconciliation
from .payment_gateway import RazorpayClient, get_payment_gateway
from .sms import TwilioSmsClient, get_sms_client

__all__ = [
    "booking_machine",
    "booking_service",
    "order_service",
    "reconciliation",
    "RazorpayClient",
    "get_payment_gateway",
    "TwilioSmsClient",
    "get_sms_client"
]
