"""Caller-facing account projection"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AccountInfo:
    """Read-only view of a cached account.

    Attributes:
        home_account_id: Stable identifier ("{uid}.{utid}" for AAD accounts)
        environment: Cache environment (preferred cache host of the authority)
        tenant_id: Realm the account signed in to
        username: preferred_username / email / upn claim
        local_account_id: oid or sub claim
        name: Display name claim
        id_token_claims: Claims of the identity token the account was built from
    """

    home_account_id: str
    environment: str
    tenant_id: str
    username: str
    local_account_id: str
    name: str | None = None
    id_token_claims: dict[str, Any] = field(default_factory=dict)
