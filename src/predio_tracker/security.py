from __future__ import annotations

import hmac
from typing import Optional


def bearer_matches(header: Optional[str], api_key: str) -> bool:
    """Check an `Authorization` header against the shared secret.

    An empty `api_key` means the check is disabled and every caller passes.
    """

    if not api_key:
        return True
    expected = f"Bearer {api_key}"
    return hmac.compare_digest((header or "").encode("utf-8"), expected.encode("utf-8"))
