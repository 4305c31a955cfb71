"""client_info decoding"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import ClientInfoDecodingError, ClientInfoEmptyError
from ..utils.constants import CLIENT_INFO_SEPARATOR

if TYPE_CHECKING:
    from ..crypto.interface import CryptoProvider


@dataclass(frozen=True)
class ClientInfo:
    """Decoded client_info: user object id and home tenant id"""

    uid: str
    utid: str

    @property
    def home_account_id(self) -> str:
        """`"{uid}.{utid}"`, or an empty string when either half is missing"""
        if not self.uid or not self.utid:
            return ""
        return f"{self.uid}{CLIENT_INFO_SEPARATOR}{self.utid}"


def build_client_info(raw_client_info: str | None, crypto: CryptoProvider) -> ClientInfo:
    """Decode the base64url JSON client_info sent by the server.

    Raises:
        ClientInfoEmptyError: If raw_client_info is empty
        ClientInfoDecodingError: If it is not base64url-encoded JSON
    """
    if not raw_client_info:
        raise ClientInfoEmptyError()

    try:
        decoded = json.loads(crypto.base64_decode(raw_client_info))
        return ClientInfo(uid=str(decoded.get("uid") or ""), utid=str(decoded.get("utid") or ""))
    except (ValueError, TypeError, AttributeError) as e:
        raise ClientInfoDecodingError(str(e)) from e
