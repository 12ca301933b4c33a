"""Application-wide notification signals.

Fire-and-forget broadcasts that let other components (for example a cache
of the storefront header logo) react to shared state changes without the
service layer knowing about them.
"""

from __future__ import annotations

from blinker import Namespace

_signals = Namespace()

# Sent after a business record is saved. Receivers get ``business=<record>``.
business_updated = _signals.signal("business-updated")
