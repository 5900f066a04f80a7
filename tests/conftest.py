import asyncio
import copy
import json
import os
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal

import asyncpg
import httpx
import pytest

os.environ.setdefault("DATABASE_USERNAME", "test")
os.environ.setdefault("DATABASE_PASSWORD", "test")
os.environ.setdefault("DATABASE_HOSTNAME", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_NAME", "shirur_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test_key_secret")
os.environ.setdefault("RAZORPAY_WEBHOOK_SECRET", "test_webhook_secret")

from fastapi.testclient import TestClient  # noqa: E402

from shirur_express import create_app  # noqa: E402
from shirur_express.database import get_db  # noqa: E402
from shirur_express.models.auth import RequestContext, UserRole  # noqa: E402
from shirur_express.models.menu import MenuCategory  # noqa: E402
from shirur_express.queries import (  # noqa: E402
    booking_queries,
    catalog_queries,
    invoice_queries,
    menu_queries,
    notification_queries,
    order_queries,
    payment_queries,
    provider_queries,
    rental_queries,
    review_queries,
    table_booking_queries,
    user_queries,
)
from shirur_express.queries.common import to_json  # noqa: E402
from shirur_express.queries.menu_queries import MenuItemRepository  # noqa: E402
from shirur_express.services.payment_gateway import RazorpayClient, get_payment_gateway  # noqa: E402
from shirur_express.services.sms import TwilioSmsClient, get_sms_client  # noqa: E402
from shirur_express.utils.auth import create_access_token, get_password_hash  # noqa: E402

TEST_PASSWORD = "password123"


def _now():
    return datetime.now(timezone.utc)


def _new_id():
    return str(uuid.uuid4())


class FakeConnection:
    """Stands in for an asyncpg connection; queries are served by MemoryStore"""

    def __init__(self):
        self.transactions = 0

    @asynccontextmanager
    async def _transaction(self):
        self.transactions += 1
        yield self

    def transaction(self):
        return self._transaction()


class MemoryStore:
    """In-memory rows behind the same call signatures as the query modules"""

    def __init__(self):
        self.users = {}
        self.categories = {}
        self.problems = {}
        self.providers = {}
        self.bookings = {}
        self.invoices = {}
        self.products = {}
        self.orders = {}
        self.intents = {}
        self.webhook_events = {}
        self.reviews = {}
        self.notifications = {}
        self.rentals = {}
        self.table_bookings = {}

    # users
    async def create_user(self, conn, username, email, password_hash, role, phone):
        user = {
            "user_id": _new_id(), "username": username, "email": email,
            "password_hash": password_hash, "role": role, "phone": phone,
            "created_at": _now(),
        }
        self.users[user["user_id"]] = user
        return copy.deepcopy(user)

    async def get_user_by_id(self, conn, user_id):
        return copy.deepcopy(self.users.get(user_id))

    async def get_user_by_username(self, conn, username):
        return next((copy.deepcopy(u) for u in self.users.values() if u["username"] == username), None)

    async def get_user_by_email(self, conn, email):
        return next((copy.deepcopy(u) for u in self.users.values() if u["email"] == email), None)

    # catalog
    def add_category(self, name, slug):
        category = {"category_id": _new_id(), "name": name, "slug": slug}
        self.categories[category["category_id"]] = category
        return category

    def add_problem(self, category_id, name, parent_id=None):
        problem = {"problem_id": _new_id(), "category_id": category_id, "name": name, "parent_id": parent_id}
        self.problems[problem["problem_id"]] = problem
        return problem

    def add_product(self, name, category, price, in_stock=True):
        product_id = len(self.products) + 1
        self.products[product_id] = {
            "product_id": product_id, "name": name, "category": category,
            "price": Decimal(price), "unit": None, "image_url": None, "in_stock": in_stock,
        }
        return self.products[product_id]

    async def list_categories(self, conn):
        return sorted(copy.deepcopy(list(self.categories.values())), key=lambda c: c["name"])

    async def get_category_by_slug(self, conn, slug):
        return next((copy.deepcopy(c) for c in self.categories.values() if c["slug"] == slug), None)

    async def list_problems(self, conn, category_id, parent_id=None):
        return [
            copy.deepcopy(p) for p in self.problems.values()
            if p["category_id"] == category_id and p["parent_id"] == parent_id
        ]

    async def list_grocery_products(self, conn, category=None, search=None):
        return [
            copy.deepcopy(p) for p in self.products.values()
            if p["in_stock"]
            and (category is None or p["category"] == category)
            and (search is None or search.lower() in p["name"].lower())
        ]

    async def get_grocery_products(self, conn, product_ids):
        return [copy.deepcopy(self.products[i]) for i in product_ids if i in self.products]

    # providers
    def _provider_row(self, provider):
        category = self.categories[provider["category_id"]]
        user = self.users[provider["user_id"]]
        return {
            **copy.deepcopy(provider),
            "category_slug": category["slug"],
            "category_name": category["name"],
            "username": user["username"],
            "phone": user["phone"],
        }

    async def create_provider(self, conn, user_id, category_id, business_name, description=None,
                              experience=None, address=None, latitude=None, longitude=None,
                              specializations=None):
        provider = {
            "provider_id": _new_id(), "user_id": user_id, "category_id": category_id,
            "business_name": business_name, "description": description, "experience": experience,
            "address": address, "latitude": latitude, "longitude": longitude,
            "specializations": specializations or [], "rating": Decimal("0"), "review_count": 0,
            "is_available": True, "created_at": _now(),
        }
        self.providers[provider["provider_id"]] = provider
        return self._provider_row(provider)

    async def get_provider(self, conn, provider_id):
        provider = self.providers.get(provider_id)
        return self._provider_row(provider) if provider else None

    async def get_provider_by_user_id(self, conn, user_id):
        provider = next((p for p in self.providers.values() if p["user_id"] == user_id), None)
        return self._provider_row(provider) if provider else None

    async def list_providers(self, conn, category_slug=None):
        rows = [self._provider_row(p) for p in self.providers.values()]
        if category_slug:
            rows = [r for r in rows if r["category_slug"] == category_slug]
        return sorted(rows, key=lambda r: (r["rating"], r["review_count"]), reverse=True)

    async def update_provider(self, conn, provider_id, updates):
        unknown = set(updates) - set(provider_queries.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not an updatable field: {sorted(unknown)}")
        self.providers[provider_id].update(updates)
        return await self.get_provider(conn, provider_id)

    async def update_provider_rating(self, conn, provider_id, rating, review_count):
        self.providers[provider_id].update(rating=rating, review_count=review_count)

    # bookings
    async def create_booking(self, conn, user_id, service_type, user_address, user_phone, provider_id=None,
                             problem_id=None, scheduled_at=None, preferred_time_slots=None, notes=None):
        booking = {
            "booking_id": _new_id(), "user_id": user_id, "provider_id": provider_id,
            "service_type": service_type, "problem_id": problem_id, "scheduled_at": scheduled_at,
            "preferred_time_slots": preferred_time_slots or [], "user_address": user_address,
            "user_phone": user_phone, "notes": notes, "status": "pending", "otp": None,
            "started_at": None, "completed_at": None, "created_at": _now(), "updated_at": _now(),
        }
        self.bookings[booking["booking_id"]] = booking
        return copy.deepcopy(booking)

    async def get_booking(self, conn, booking_id):
        snapshot = copy.deepcopy(self.bookings.get(booking_id))
        # a real query suspends here, letting concurrent requests interleave
        await asyncio.sleep(0)
        return snapshot

    async def update_booking_if_status(self, conn, booking_id, expected_status, new_status, fields=None,
                                       expected_otp=None, claim_provider_id=None):
        fields = fields or {}
        unknown = set(fields) - set(booking_queries.TRANSITION_FIELDS)
        if unknown:
            raise ValueError(f"Not a transition field: {sorted(unknown)}")
        booking = self.bookings.get(booking_id)
        if booking is None or booking["status"] != expected_status:
            return None
        if expected_otp is not None and booking["otp"] != expected_otp:
            return None
        if claim_provider_id is not None:
            if booking["provider_id"] not in (None, claim_provider_id):
                return None
            booking["provider_id"] = claim_provider_id
        booking.update(fields)
        booking["status"] = new_status
        booking["updated_at"] = _now()
        return copy.deepcopy(booking)

    async def get_user_bookings(self, conn, user_id, status=None):
        return [
            copy.deepcopy(b) for b in self.bookings.values()
            if b["user_id"] == user_id and (status is None or b["status"] == status)
        ]

    async def get_provider_bookings(self, conn, provider_id, category_slug):
        return [
            copy.deepcopy(b) for b in self.bookings.values()
            if b["provider_id"] == provider_id
            or (b["provider_id"] is None and b["status"] == "pending" and b["service_type"] == category_slug)
        ]

    # invoices
    async def create_invoice(self, conn, booking_id, spare_parts, service_charge, notes, total):
        if any(i["booking_id"] == booking_id for i in self.invoices.values()):
            raise ValueError("duplicate key value violates unique constraint")
        invoice = {
            "invoice_id": _new_id(), "booking_id": booking_id,
            "spare_parts": json.loads(to_json(spare_parts)), "service_charge": service_charge,
            "notes": notes, "total": total, "created_at": _now(),
        }
        self.invoices[invoice["invoice_id"]] = invoice
        return copy.deepcopy(invoice)

    async def get_invoice_by_booking(self, conn, booking_id):
        return next((copy.deepcopy(i) for i in self.invoices.values() if i["booking_id"] == booking_id), None)

    # orders
    async def create_order(self, conn, user_id, items, subtotal, platform_fee, delivery_fee, total,
                           delivery_address):
        assert total == subtotal + platform_fee + delivery_fee
        order = {
            "order_id": _new_id(), "user_id": user_id, "items": json.loads(to_json(items)),
            "subtotal": subtotal, "platform_fee": platform_fee, "delivery_fee": delivery_fee,
            "total": total, "delivery_address": delivery_address, "payment_intent_ref": None,
            "payment_id": None, "status": "pending", "paid_at": None, "created_at": _now(),
        }
        self.orders[order["order_id"]] = order
        return copy.deepcopy(order)

    async def get_order(self, conn, order_id):
        return copy.deepcopy(self.orders.get(order_id))

    async def attach_payment_intent(self, conn, order_id, gateway_order_id):
        order = self.orders.get(order_id)
        if order is None or order["status"] != "pending" or order["payment_intent_ref"] is not None:
            return None
        order["payment_intent_ref"] = gateway_order_id
        return copy.deepcopy(order)

    async def mark_order_paid_if_pending(self, conn, order_id, payment_id):
        order = self.orders.get(order_id)
        if order is None or order["status"] != "pending":
            return None
        order.update(status="paid", payment_id=payment_id, paid_at=_now())
        return copy.deepcopy(order)

    # payment intents
    async def create_payment_intent(self, conn, gateway_order_id, target, amount, currency,
                                    order_id=None, booking_id=None):
        for open_intent in self.intents.values():
            if open_intent["status"] == "created" and (
                (order_id and open_intent["order_id"] == order_id)
                or (booking_id and open_intent["booking_id"] == booking_id)
            ):
                raise asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
        intent = {
            "gateway_order_id": gateway_order_id, "target": target, "order_id": order_id,
            "booking_id": booking_id, "amount": amount, "currency": currency, "status": "created",
            "payment_id": None, "settled_by": None, "created_at": _now(), "paid_at": None,
        }
        self.intents[gateway_order_id] = intent
        return copy.deepcopy(intent)

    async def get_payment_intent(self, conn, gateway_order_id):
        return copy.deepcopy(self.intents.get(gateway_order_id))

    async def get_open_intent_for_order(self, conn, order_id):
        return next(
            (copy.deepcopy(i) for i in self.intents.values()
             if i["order_id"] == order_id and i["status"] == "created"),
            None
        )

    async def get_open_intent_for_booking(self, conn, booking_id):
        return next(
            (copy.deepcopy(i) for i in self.intents.values()
             if i["booking_id"] == booking_id and i["status"] == "created"),
            None
        )

    async def mark_intent_paid(self, conn, gateway_order_id, payment_id, settled_by):
        intent = self.intents.get(gateway_order_id)
        if intent is None or intent["status"] != "created":
            return None
        intent.update(status="paid", payment_id=payment_id, settled_by=settled_by, paid_at=_now())
        return copy.deepcopy(intent)

    async def record_webhook_event(self, conn, event_id, event_type, gateway_order_id):
        if event_id in self.webhook_events:
            return False
        self.webhook_events[event_id] = {"event_type": event_type, "gateway_order_id": gateway_order_id}
        return True

    # reviews
    async def create_review(self, conn, booking_id, user_id, provider_id, rating, comment):
        review = {
            "review_id": _new_id(), "booking_id": booking_id, "user_id": user_id,
            "provider_id": provider_id, "rating": rating, "comment": comment, "created_at": _now(),
        }
        self.reviews[review["review_id"]] = review
        return copy.deepcopy(review)

    async def review_exists(self, conn, booking_id, user_id):
        return any(r["booking_id"] == booking_id and r["user_id"] == user_id for r in self.reviews.values())

    async def get_provider_rating_stats(self, conn, provider_id):
        ratings = [r["rating"] for r in self.reviews.values() if r["provider_id"] == provider_id]
        if not ratings:
            return {"average": None, "count": 0}
        average = (Decimal(sum(ratings)) / len(ratings)).quantize(Decimal("0.01"))
        return {"average": average, "count": len(ratings)}

    async def get_provider_reviews(self, conn, provider_id):
        return [
            {**copy.deepcopy(r), "username": self.users[r["user_id"]]["username"]}
            for r in self.reviews.values() if r["provider_id"] == provider_id
        ]

    # notifications
    async def create_notification(self, conn, recipient_id, message):
        notification = {
            "notification_id": _new_id(), "recipient_id": recipient_id, "message": message,
            "is_read": False, "created_at": _now(),
        }
        self.notifications[notification["notification_id"]] = notification

    async def get_notifications(self, conn, recipient_id, status="all"):
        rows = [n for n in self.notifications.values() if n["recipient_id"] == recipient_id]
        if status == "read":
            rows = [n for n in rows if n["is_read"]]
        elif status == "unread":
            rows = [n for n in rows if not n["is_read"]]
        return copy.deepcopy(rows)

    async def count_unread(self, conn, recipient_id):
        return len(await self.get_notifications(conn, recipient_id, "unread"))

    async def mark_read(self, conn, notification_id, recipient_id):
        notification = self.notifications.get(notification_id)
        if notification is None or notification["recipient_id"] != recipient_id:
            return False
        notification["is_read"] = True
        return True

    async def mark_all_read(self, conn, recipient_id):
        for notification in self.notifications.values():
            if notification["recipient_id"] == recipient_id:
                notification["is_read"] = True

    def messages_for(self, user_id):
        return [n["message"] for n in self.notifications.values() if n["recipient_id"] == user_id]

    # rentals
    def _rental_row(self, listing):
        owner = self.users[listing["owner_id"]]
        return {**copy.deepcopy(listing), "owner_name": owner["username"], "owner_phone": owner["phone"]}

    async def create_rental_property(self, conn, owner_id, title, property_type, rent, locality, description=None,
                                     area=None, bedrooms=None, bathrooms=None, furnishing=None, address=None,
                                     latitude=None, longitude=None, amenities=None, images=None):
        listing = {
            "property_id": _new_id(), "owner_id": owner_id, "title": title, "description": description,
            "property_type": property_type, "rent": rent, "area": area, "bedrooms": bedrooms,
            "bathrooms": bathrooms, "furnishing": furnishing, "address": address, "locality": locality,
            "latitude": latitude, "longitude": longitude, "amenities": amenities or [],
            "images": images or [], "is_available": True, "created_at": _now(),
        }
        self.rentals[listing["property_id"]] = listing
        return self._rental_row(listing)

    async def get_rental_property(self, conn, property_id):
        listing = self.rentals.get(property_id)
        return self._rental_row(listing) if listing else None

    async def list_rental_properties(self, conn, property_type=None, min_rent=None, max_rent=None,
                                     furnishing=None, locality=None):
        rows = [
            self._rental_row(r) for r in self.rentals.values()
            if r["is_available"]
            and (property_type is None or r["property_type"] == property_type)
            and (min_rent is None or r["rent"] >= min_rent)
            and (max_rent is None or r["rent"] <= max_rent)
            and (furnishing is None or r["furnishing"] == furnishing)
            and (locality is None or locality.lower() in r["locality"].lower())
        ]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    # table bookings
    async def create_table_booking(self, conn, user_id, provider_id, booking_date, booking_time, party_size,
                                   special_requests=None):
        booking = {
            "table_booking_id": _new_id(), "user_id": user_id, "provider_id": provider_id,
            "booking_date": booking_date, "booking_time": booking_time, "party_size": party_size,
            "special_requests": special_requests, "status": "pending", "created_at": _now(),
        }
        self.table_bookings[booking["table_booking_id"]] = booking
        return copy.deepcopy(booking)

    async def get_table_booking(self, conn, table_booking_id):
        return copy.deepcopy(self.table_bookings.get(table_booking_id))

    async def get_user_table_bookings(self, conn, user_id):
        return [copy.deepcopy(b) for b in self.table_bookings.values() if b["user_id"] == user_id]

    async def get_provider_table_bookings(self, conn, provider_id):
        return [copy.deepcopy(b) for b in self.table_bookings.values() if b["provider_id"] == provider_id]

    async def update_table_booking_status(self, conn, table_booking_id, expected_status, new_status):
        booking = self.table_bookings.get(table_booking_id)
        if booking is None or booking["status"] != expected_status:
            return None
        booking["status"] = new_status
        return copy.deepcopy(booking)


class MemoryMenuRepository(MenuItemRepository):

    def __init__(self, category: MenuCategory):
        self.category = category
        self.items = {}

    async def create(self, conn, provider_id, data):
        item = {
            "item_id": _new_id(), "provider_id": provider_id, "category": self.category.value,
            **{k: v for k, v in data.items() if v is not None},
        }
        item.setdefault("is_available", True)
        self.items[item["item_id"]] = item
        return copy.deepcopy(item)

    async def update(self, conn, item_id, provider_id, updates):
        item = self.items.get(item_id)
        if item is None or item["provider_id"] != provider_id:
            return None
        item.update({k: v for k, v in updates.items() if v is not None})
        return copy.deepcopy(item)

    async def delete(self, conn, item_id, provider_id):
        item = self.items.get(item_id)
        if item is None or item["provider_id"] != provider_id:
            return False
        del self.items[item_id]
        return True

    async def list_by_provider(self, conn, provider_id):
        return [copy.deepcopy(i) for i in self.items.values() if i["provider_id"] == provider_id]

    async def list_available(self, conn, provider_id=None, search=None):
        return [
            copy.deepcopy(i) for i in self.items.values()
            if i["is_available"]
            and (provider_id is None or i["provider_id"] == provider_id)
            and (search is None or search.lower() in i["name"].lower())
        ]


PATCHED_QUERIES = {
    user_queries: ("create_user", "get_user_by_id", "get_user_by_username", "get_user_by_email"),
    catalog_queries: ("list_categories", "get_category_by_slug", "list_problems",
                      "list_grocery_products", "get_grocery_products"),
    provider_queries: ("create_provider", "get_provider", "get_provider_by_user_id", "list_providers",
                       "update_provider", "update_provider_rating"),
    booking_queries: ("create_booking", "get_booking", "update_booking_if_status",
                      "get_user_bookings", "get_provider_bookings"),
    invoice_queries: ("create_invoice", "get_invoice_by_booking"),
    order_queries: ("create_order", "get_order", "attach_payment_intent", "mark_order_paid_if_pending"),
    payment_queries: ("create_payment_intent", "get_payment_intent", "get_open_intent_for_order",
                      "get_open_intent_for_booking", "mark_intent_paid", "record_webhook_event"),
    review_queries: ("create_review", "review_exists", "get_provider_rating_stats", "get_provider_reviews"),
    notification_queries: ("create_notification", "get_notifications", "count_unread",
                           "mark_read", "mark_all_read"),
    rental_queries: ("create_rental_property", "get_rental_property", "list_rental_properties"),
    table_booking_queries: ("create_table_booking", "get_table_booking", "get_user_table_bookings",
                            "get_provider_table_bookings", "update_table_booking_status"),
}


@pytest.fixture
def store(monkeypatch):
    memory = MemoryStore()
    for module, names in PATCHED_QUERIES.items():
        for name in names:
            monkeypatch.setattr(module, name, getattr(memory, name))
    for category in MenuCategory:
        monkeypatch.setitem(menu_queries.MENU_REPOSITORIES, category, MemoryMenuRepository(category))

    memory.electrician = memory.add_category("Electrician", "electrician")
    memory.beauty = memory.add_category("Beauty & Salon", "beauty")
    memory.add_category("Cake Shop", "cake-shop")
    device = memory.add_problem(memory.electrician["category_id"], "Air Conditioner (AC)")
    memory.add_problem(memory.electrician["category_id"], "Not cooling properly", device["problem_id"])
    memory.add_product("Bananas", "fruits", "40.00")
    memory.add_product("Milk", "dairy", "27.00")
    memory.add_product("Saffron", "spices", "350.00", in_stock=False)
    return memory


@pytest.fixture
def conn():
    return FakeConnection()


def _add_user(store, username, role, phone="9876543210"):
    user = {
        "user_id": _new_id(), "username": username, "email": f"{username}@example.com",
        "password_hash": get_password_hash(TEST_PASSWORD), "role": role, "phone": phone,
        "created_at": _now(),
    }
    store.users[user["user_id"]] = user
    return user


@pytest.fixture
def customer(store):
    return _add_user(store, "asha", UserRole.CUSTOMER.value)


@pytest.fixture
def provider(store):
    """Electrician with a profile; the returned dict is the provider row plus its user"""
    user = _add_user(store, "ravi", UserRole.PROVIDER.value, phone="9822000000")
    return {**_add_provider(store, user, store.electrician, "Ravi Electricals", 18.8286, 74.3740), "user": user}


def _add_provider(store, user, category, business_name, latitude=None, longitude=None):
    provider = {
        "provider_id": _new_id(), "user_id": user["user_id"], "category_id": category["category_id"],
        "business_name": business_name, "description": None, "experience": None, "address": None,
        "latitude": latitude, "longitude": longitude, "specializations": [],
        "rating": Decimal("0"), "review_count": 0, "is_available": True, "created_at": _now(),
    }
    store.providers[provider["provider_id"]] = provider
    return store._provider_row(provider)


@pytest.fixture
def customer_ctx(customer):
    return RequestContext(
        user_id=customer["user_id"], role=UserRole.CUSTOMER,
        username=customer["username"], phone=customer["phone"],
    )


@pytest.fixture
def provider_ctx(provider):
    return RequestContext(
        user_id=provider["user_id"], role=UserRole.PROVIDER, username=provider["username"],
        phone=provider["phone"], provider_id=provider["provider_id"], provider_category="electrician",
    )


def token_for(user):
    return create_access_token({"sub": user["user_id"], "role": user["role"]})


def auth_headers(user):
    return {"Authorization": f"Bearer {token_for(user)}"}


class GatewayRecorder:
    """httpx.MockTransport handler that plays the Razorpay Orders API"""

    def __init__(self, status_code=200, fail_with=None):
        self.status_code = status_code
        self.fail_with = fail_with
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.fail_with is not None:
            raise self.fail_with
        body = json.loads(request.content)
        self.requests.append(body)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"error": {"description": "bad request"}})
        return httpx.Response(200, json={
            "id": f"order_{len(self.requests):04d}TEST",
            "amount": body["amount"],
            "currency": body["currency"],
            "status": "created",
        })


class SmsRecorder:
    def __init__(self, status_code=201):
        self.status_code = status_code
        self.messages = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        form = dict(httpx.QueryParams(request.content.decode()))
        self.messages.append(form)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"message": "invalid number"})
        return httpx.Response(self.status_code, json={"sid": f"SM{len(self.messages):04d}"})


@pytest.fixture
def gateway_recorder():
    return GatewayRecorder()


@pytest.fixture
def gateway(gateway_recorder):
    return RazorpayClient("rzp_test_key", "test_key_secret", transport=httpx.MockTransport(gateway_recorder))


@pytest.fixture
def sms_recorder():
    return SmsRecorder()


@pytest.fixture
def sms(sms_recorder):
    return TwilioSmsClient("AC123", "token", "+15550001111", transport=httpx.MockTransport(sms_recorder))


@pytest.fixture
def client(store, conn, gateway, sms):
    app = create_app()

    async def override_get_db():
        yield conn

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_sms_client] = lambda: sms
    with TestClient(app) as test_client:
        yield test_client
