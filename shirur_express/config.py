# shirur_express/config.py
from decimal import Decimal
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # Database
    database_username: str
    database_password: str
    database_hostname: str
    database_port: str
    database_name: str

    # Auth
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Payment gateway (Razorpay)
    razorpay_key_id: str
    razorpay_key_secret: str
    razorpay_webhook_secret: str
    razorpay_api_base: str = "https://api.razorpay.com/v1"
    gateway_timeout_seconds: float = 10.0
    currency: str = "INR"

    # SMS (Twilio); an empty sender number disables SMS
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_from_number: str = ""
    sms_timeout_seconds: float = 10.0

    # Checkout fees
    platform_fee_rate: Decimal = Decimal("0.01")
    delivery_fee: Decimal = Decimal("24.50")

    otp_length: int = 6

    # CORS
    allowed_origins: List[str] = ["*"]

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
