from storefront.services.audit_service import AuditService
from storefront.services.bootstrap_service import BOOTSTRAP_KEY, bootstrap
from storefront.services import build_services

from conftest import TEST_CONFIG


def _run(store, **kwargs):
    return bootstrap(store, AuditService(store), bcrypt_rounds=4, **kwargs)


def test_fresh_store_gets_demo_accounts_and_audit_entry(store):
    report = _run(store)

    assert report.users_seeded == 3
    assert report.audit_initialized is True
    users = {u["username"]: u for u in store.users.list()}
    assert set(users) == {"john", "alice", "michael"}
    assert users["alice"]["status"] == "DISABLED"
    assert users["john"]["email"] == "john.doe@example.com"
    assert all(u["role"] == "USER" for u in users.values())
    assert users["john"]["createdAt"] < users["michael"]["createdAt"]
    assert store.audit_logs.count() == 1


def test_second_run_creates_nothing(store):
    _run(store)
    report = _run(store)

    assert report.users_seeded == 0
    assert report.audit_initialized is False
    assert store.users.count() == 3
    assert store.audit_logs.count() == 1


def test_deleted_demo_accounts_are_not_reseeded(store):
    _run(store)
    store.users.clear()

    assert _run(store).users_seeded == 0
    assert store.users.count() == 0


def test_existing_accounts_block_seeding(store):
    store.users.put("user-x", {"id": "user-x", "username": "real"})
    assert _run(store).users_seeded == 0
    assert store.system_settings.get(BOOTSTRAP_KEY) is not None


def test_seeding_can_be_switched_off(store):
    report = _run(store, seed_demo_users_enabled=False)
    assert report.users_seeded == 0
    assert store.users.count() == 0
    assert report.audit_initialized is True


def test_listing_users_never_seeds(store):
    services = build_services(store, TEST_CONFIG)
    assert services.admin.list_users() == []
    assert store.users.count() == 0


def test_seeded_accounts_can_log_in(store):
    _run(store)
    services = build_services(store, TEST_CONFIG)
    assert services.identity.login("john", "password")["name"] == "John Doe"
    assert services.identity.login("michael@dunder-mifflin.com", "password")["id"] == "user-4"
