# Overview: Service-layer operations for invitation signup; provisions a user and its business together.

"""
Invitation Provisioning

WHY: Owners only join through an invitation link. Onboarding creates the
owner account and the linked business as one logical unit: validate the
code, register the user (which logs them in), create the business.

ATOMICITY: The store has no transactions, so a failed business creation
is compensated by deleting the just-registered user and clearing the
session. Provisioning leaves both records or neither.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidInvitationError, InvalidTransitionError
from ..repository import RecordStore
from .business_service import BusinessService
from .identity_service import IdentityService

logger = logging.getLogger(__name__)

BUSINESS_FIELDS = (
    "businessName",
    "description",
    "whatsappNumber",
    "address",
    "operatingHours",
    "bankName",
    "accountName",
    "accountNumber",
)


@dataclass
class ProvisioningResult:
    user: dict
    business: dict

    def to_dict(self) -> dict:
        return {"user": self.user, "business": self.business}


class ProvisioningService:
    def __init__(
        self,
        identity: IdentityService,
        businesses: BusinessService,
        store: RecordStore,
        invite_codes: list[str] | tuple[str, ...] = (),
    ):
        self.identity = identity
        self.businesses = businesses
        self.store = store
        self.invite_codes = tuple(invite_codes)

    def validate_invitation(self, code: str | None) -> str:
        """
        Returns the normalized code.

        An empty allow-list accepts any non-blank code.
        """
        code = (code or "").strip()
        if not code:
            raise InvalidInvitationError()
        if self.invite_codes and code not in self.invite_codes:
            raise InvalidInvitationError()
        return code

    def provision(self, code: str, form: dict) -> ProvisioningResult:
        """
        Onboard an owner from the invitation form.

        ``form`` carries username, password, fullName plus the business fields
        (businessName, description, whatsappNumber, address, operatingHours,
        bankName, accountName, accountNumber).
        """
        self.validate_invitation(code)

        user = self.identity.register(
            form.get("username", ""),
            form.get("password", ""),
            form.get("fullName", ""),
        )
        details = {key: form.get(key) for key in BUSINESS_FIELDS}
        try:
            business = self.businesses.create(user, details)
        except Exception:
            logger.warning("Business creation failed for %s; removing the new account", user["id"])
            self.store.users.delete(user["id"])
            self.identity.logout()
            raise

        return ProvisioningResult(user=user, business=business)


class SignupStep(str, Enum):
    SCAN = "scan"
    FORM = "form"
    PROCESSING = "processing"
    SUCCESS = "success"


class SignupFlow:
    """
    Invitation screen state machine.

    scan -> form -> processing -> success, or back to form with ``error``
    set when provisioning fails. The form can be resubmitted after an error.
    """

    def __init__(self, provisioning: ProvisioningService):
        self.provisioning = provisioning
        self.step = SignupStep.SCAN
        self.code: str | None = None
        self.error: str | None = None
        self.result: ProvisioningResult | None = None

    def scan(self, code: str) -> SignupStep:
        if self.step is not SignupStep.SCAN:
            raise InvalidTransitionError(f"Cannot scan during {self.step.value}")
        self.code = self.provisioning.validate_invitation(code)
        self.step = SignupStep.FORM
        return self.step

    def submit(self, form: dict) -> ProvisioningResult:
        if self.step is not SignupStep.FORM:
            raise InvalidTransitionError(f"Cannot submit during {self.step.value}")
        self.step = SignupStep.PROCESSING
        self.error = None
        try:
            self.result = self.provisioning.provision(self.code, form)
        except Exception as exc:
            self.error = str(exc) or "Registration failed"
            self.step = SignupStep.FORM
            raise
        self.step = SignupStep.SUCCESS
        return self.result
