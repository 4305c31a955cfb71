"""Identity material decoded from server responses"""

from .account_info import AccountInfo
from .auth_token import AuthToken, extract_token_claims
from .client_info import ClientInfo, build_client_info

__all__ = ["AccountInfo", "AuthToken", "ClientInfo", "build_client_info", "extract_token_claims"]
