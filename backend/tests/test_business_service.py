"""
Business provisioning service tests.

Verifies:
- create() fills defaults and seeds the starter catalog
- update() is a full replace that upserts and bumps the version
- concurrent saves are detected via the version
- update() broadcasts business_updated
"""

import httpx
import pytest

from storefront.domain import DEFAULT_OPERATING_HOURS, NOT_CONFIGURED, PLACEHOLDER_ACCOUNT_NUMBER
from storefront.errors import BusinessNotFoundError, StaleRecordError, ValidationError
from storefront.services.business_service import BusinessService, whatsapp_link
from storefront.signals import business_updated

from conftest import gemini_reply, mock_generator


OWNER = {"id": "user-1", "name": "John"}


@pytest.fixture
def businesses(store):
    return BusinessService(store)


class TestCreate:
    def test_defaults_and_starter_catalog(self, businesses, store):
        business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "15551234567"})

        assert business["ownerId"] == "user-1"
        assert business["name"] == "Acme"
        assert business["operatingHours"] == DEFAULT_OPERATING_HOURS
        assert business["bankName"] == NOT_CONFIGURED
        assert business["accountName"] == NOT_CONFIGURED
        assert business["accountNumber"] == PLACEHOLDER_ACCOUNT_NUMBER
        assert [p["name"] for p in business["products"]] == ["Starter Package", "Premium Package", "Consultation"]
        assert [p["price"] for p in business["products"]] == [99, 299, 49]
        assert len({p["id"] for p in business["products"]}) == 3
        assert store.businesses.get(business["id"])["name"] == "Acme"

    def test_supplied_fields_win_over_defaults(self, businesses):
        business = businesses.create(OWNER, {
            "businessName": "Acme",
            "whatsappNumber": "1555",
            "operatingHours": "24/7",
            "bankName": "First Bank",
            "accountNumber": "123",
        })
        assert business["operatingHours"] == "24/7"
        assert business["bankName"] == "First Bank"
        assert business["accountNumber"] == "123"

    @pytest.mark.parametrize("details", [
        {"whatsappNumber": "1555"},
        {"businessName": "Acme"},
        {"businessName": "  ", "whatsappNumber": "1555"},
    ])
    def test_name_and_whatsapp_required(self, businesses, details):
        with pytest.raises(ValidationError):
            businesses.create(OWNER, details)

    def test_create_twice_yields_two_businesses(self, businesses, store):
        businesses.create(OWNER, {"businessName": "A", "whatsappNumber": "1"})
        businesses.create(OWNER, {"businessName": "B", "whatsappNumber": "2"})
        assert store.businesses.count() == 2
        assert businesses.get_by_owner("user-1")["name"] == "A"


class TestUpdate:
    def test_replace_drops_removed_products(self, businesses, store):
        business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1555"})
        business["products"] = business["products"][:1]

        updated = businesses.update(business)

        assert len(updated["products"]) == 1
        assert store.businesses.get(business["id"])["products"] == updated["products"]
        assert updated["version"] == 2

    def test_update_unknown_id_inserts(self, businesses, store):
        profile = businesses.default_profile(OWNER)
        saved = businesses.update(profile)
        assert saved["version"] == 1
        assert businesses.get_by_owner("user-1")["id"] == profile["id"]
        assert store.businesses.count() == 1

    def test_stale_save_is_rejected(self, businesses):
        first_read = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1555"})
        businesses.update(dict(first_read, name="Acme Two"))

        with pytest.raises(StaleRecordError):
            businesses.update(dict(first_read, name="Acme Three"))
        assert businesses.get_by_id(first_read["id"])["name"] == "Acme Two"

    def test_invalid_product_rejected(self, businesses):
        business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1555"})
        business["products"].append({"name": "Freebie", "price": -1})
        with pytest.raises(ValidationError):
            businesses.update(business)

    @pytest.mark.parametrize("price", ["1e400", "inf", float("-inf"), "nan", 10_000_000, 10 ** 400])
    def test_non_finite_or_oversized_price_rejected(self, businesses, price):
        business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1555"})
        business["products"].append({"name": "Unbounded", "price": price})
        with pytest.raises(ValidationError):
            businesses.update(business)

    def test_price_at_upper_bound_accepted(self, businesses):
        business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1555"})
        business["products"].append({"name": "Flagship", "price": "9999999.99"})
        assert businesses.update(business)["products"][-1]["price"] == 9999999.99

    def test_duplicate_product_ids_rejected(self, businesses):
        business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1555"})
        business["products"].append(dict(business["products"][0]))
        with pytest.raises(ValidationError):
            businesses.update(business)

    def test_update_broadcasts_signal(self, businesses):
        received = []

        def receiver(sender, business):
            received.append(business)

        business_updated.connect(receiver)
        try:
            business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1555"})
            businesses.update(dict(business, logoUrl="https://cdn.example/logo.png"))
        finally:
            business_updated.disconnect(receiver)

        assert len(received) == 1
        assert received[0]["logoUrl"] == "https://cdn.example/logo.png"


class TestWelcomeMessage:
    def test_templated_without_api_key(self, businesses):
        business = businesses.create(OWNER, {
            "businessName": "Acme", "whatsappNumber": "1555", "description": "widgets",
        })
        updated = businesses.generate_welcome_message(business["id"])
        assert updated["welcomeMessage"] == "Welcome to Acme! We offer widgets. How can we help?"

    def test_generated_message_is_stored(self, store):
        generator = mock_generator(lambda request: httpx.Response(200, json=gemini_reply("Hi {name}, welcome to Acme!")))
        businesses = BusinessService(store, generator)
        business = businesses.create(OWNER, {"businessName": "Acme", "whatsappNumber": "1555"})

        businesses.generate_welcome_message(business["id"])

        assert store.businesses.get(business["id"])["welcomeMessage"] == "Hi {name}, welcome to Acme!"

    def test_unknown_business(self, businesses):
        with pytest.raises(BusinessNotFoundError):
            businesses.generate_welcome_message("biz-missing")


def test_whatsapp_link_encodes_message():
    link = whatsapp_link({"whatsappNumber": "+1 (555) 123-4567", "welcomeMessage": "Hi there & welcome"})
    assert link == "https://wa.me/15551234567?text=Hi%20there%20%26%20welcome"


def test_whatsapp_link_defaults_text():
    assert whatsapp_link({"whatsappNumber": "1555", "welcomeMessage": ""}) == "https://wa.me/1555?text=Hi"
