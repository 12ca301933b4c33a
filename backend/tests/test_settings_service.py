import unittest

from storefront.errors import ValidationError
from storefront.repository import RecordStore
from storefront.services.audit_service import AuditService
from storefront.services.settings_service import BANK_DETAILS_KEY, SettingsService


ADMIN = {"id": "admin-1", "name": "Super Admin", "role": "ADMIN"}
OWNER = {"id": "user-2", "name": "John", "role": "USER"}

DETAILS = {
    "bankName": "Moniepoint",
    "accountName": "DavPro Ltd",
    "accountNumber": "8012345678",
    "isVisible": True,
}


class SettingsServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = RecordStore.in_memory()
        self.settings = SettingsService(self.store, AuditService(self.store))

    def test_defaults_when_never_saved(self):
        self.assertEqual(
            self.settings.get(),
            {"bankName": "", "accountName": "", "accountNumber": "", "isVisible": False},
        )

    def test_save_then_get(self):
        self.settings.save(DETAILS)
        self.assertEqual(self.settings.get(), DETAILS)

    def test_save_overwrites_every_field(self):
        self.settings.save(DETAILS)
        self.settings.save({"bankName": "GTBank", "isVisible": False})
        self.assertEqual(
            self.settings.get(),
            {"bankName": "GTBank", "accountName": "", "accountNumber": "", "isVisible": False},
        )
        self.assertEqual(self.store.system_settings.get(BANK_DETAILS_KEY)["version"], 2)

    def test_is_visible_must_be_boolean(self):
        with self.assertRaises(ValidationError):
            self.settings.save(dict(DETAILS, isVisible="yes"))

    def test_admin_save_is_audited(self):
        self.settings.save(DETAILS, actor=ADMIN)
        entries = self.store.audit_logs.list()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0]["action"], "SYSTEM_UPDATE")
        self.assertEqual(entries[0]["targetUser"], "SYSTEM")
        self.assertEqual(entries[0]["details"], "Admin updated monetization settings. Public: true")

    def test_hidden_details_only_reach_admins(self):
        self.settings.save(dict(DETAILS, isVisible=False))
        self.assertIsNone(self.settings.get_for_viewer(OWNER))
        self.assertIsNone(self.settings.get_for_viewer(None))
        self.assertEqual(self.settings.get_for_viewer(ADMIN)["bankName"], "Moniepoint")

    def test_visible_details_reach_owners(self):
        self.settings.save(DETAILS)
        self.assertEqual(self.settings.get_for_viewer(OWNER), DETAILS)


if __name__ == "__main__":
    unittest.main()
