"""Server response validation, mapping, caching and result assembly"""

from .authentication_result import AuthenticationResult, generate_authentication_result
from .cache_record_mapper import CacheEntityMapper
from .response_handler import ResponseHandler
from .server_responses import ServerAuthorizationCodeResponse, ServerTokenResponse
from .validation import validate_authorization_code_response, validate_token_response

__all__ = [
    "AuthenticationResult",
    "CacheEntityMapper",
    "ResponseHandler",
    "ServerAuthorizationCodeResponse",
    "ServerTokenResponse",
    "generate_authentication_result",
    "validate_authorization_code_response",
    "validate_token_response",
]
