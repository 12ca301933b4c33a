"""
Checkout tests: payment proof submission and owner review of orders.
"""

from unittest import mock

import httpx
import pytest

from storefront.errors import BusinessNotFoundError, ForbiddenError, OrderNotFoundError, ValidationError
from storefront.services.business_service import BusinessService
from storefront.services.checkout_service import CheckoutService

from conftest import gemini_reply, mock_generator


OWNER = {"id": "user-1", "name": "John", "role": "USER"}
STRANGER = {"id": "user-9", "name": "Eve", "role": "USER"}


@pytest.fixture
def business(services):
    return services.businesses.create(OWNER, {
        "businessName": "Acme",
        "whatsappNumber": "15551234567",
        "bankName": "First Bank",
        "accountName": "Acme Ltd",
        "accountNumber": "0123456789",
    })


def _submit(checkout, business_id, **overrides):
    fields = dict(
        customer_name="Ada",
        customer_whatsapp="15550001111",
        order_reference="INV-1",
        amount="99.50",
        proof_url="https://img.example/proof.png",
    )
    fields.update(overrides)
    return checkout.submit_payment_proof(business_id, **fields)


class TestCheckoutDetails:
    def test_shows_bank_details_and_catalog(self, services, business):
        details = services.checkout.checkout_details(business["id"])
        assert details["name"] == "Acme"
        assert details["accountNumber"] == "0123456789"
        assert len(details["products"]) == 3

    def test_unknown_business(self, services):
        with pytest.raises(BusinessNotFoundError):
            services.checkout.checkout_details("biz-missing")


class TestSubmitProof:
    def test_creates_pending_order_with_verdict(self, services, business, store):
        order = _submit(services.checkout, business["id"])

        assert order["status"] == "PENDING"
        assert order["amount"] == 99.5
        assert order["businessId"] == business["id"]
        assert order["verification"] == {"valid": True, "reason": "Mock validation: API Key missing."}
        assert store.orders.get(order["id"])["orderReference"] == "INV-1"

    def test_uses_ai_verdict(self, store):
        generator = mock_generator(lambda request: httpx.Response(
            200, json=gemini_reply('{"valid": false, "reason": "Amount not visible"}')
        ))
        businesses = BusinessService(store, generator)
        checkout = CheckoutService(store, businesses, generator)
        business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1"})

        order = _submit(checkout, business["id"])

        assert order["verification"] == {"valid": False, "reason": "Amount not visible"}
        assert order["status"] == "PENDING"

    @pytest.mark.parametrize("overrides", [
        {"order_reference": ""},
        {"proof_url": " "},
        {"amount": "lots"},
        {"amount": -5},
        {"amount": True},
        {"amount": "1e400"},
        {"amount": float("inf")},
        {"amount": "nan"},
        {"amount": 10_000_000},
    ])
    def test_invalid_input(self, services, business, overrides):
        with pytest.raises(ValidationError):
            _submit(services.checkout, business["id"], **overrides)

    def test_unknown_business(self, services):
        with pytest.raises(BusinessNotFoundError):
            _submit(services.checkout, "biz-missing")


class TestOrders:
    def test_list_newest_first_and_scoped_to_business(self, services, business):
        other = services.businesses.create(STRANGER, {"businessName": "Other", "whatsappNumber": "2"})
        with mock.patch("storefront.services.checkout_service.now_ms", side_effect=[1000, 2000, 3000]):
            first = _submit(services.checkout, business["id"], order_reference="A")
            _submit(services.checkout, other["id"], order_reference="B")
            third = _submit(services.checkout, business["id"], order_reference="C")

        orders = services.checkout.list_orders(business["id"])
        assert [o["id"] for o in orders] == [third["id"], first["id"]]

    def test_owner_confirms_and_rejects(self, services, business):
        order = _submit(services.checkout, business["id"])
        assert services.checkout.set_order_status(OWNER, order["id"], "confirmed")["status"] == "CONFIRMED"
        assert services.checkout.set_order_status(OWNER, order["id"], "REJECTED")["status"] == "REJECTED"

    def test_only_owner_may_review(self, services, business):
        order = _submit(services.checkout, business["id"])
        with pytest.raises(ForbiddenError):
            services.checkout.set_order_status(STRANGER, order["id"], "CONFIRMED")

    @pytest.mark.parametrize("status", ["PENDING", "SHIPPED"])
    def test_review_status_must_be_final(self, services, business, status):
        order = _submit(services.checkout, business["id"])
        with pytest.raises(ValidationError):
            services.checkout.set_order_status(OWNER, order["id"], status)

    def test_unknown_order(self, services):
        with pytest.raises(OrderNotFoundError):
            services.checkout.set_order_status(OWNER, "ord-missing", "CONFIRMED")
