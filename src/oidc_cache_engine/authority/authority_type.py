"""Authority classification"""

from enum import Enum


class AuthorityType(Enum):
    """Kind of identity provider behind an authority"""

    DEFAULT = "default"
    ADFS = "adfs"


class ProtocolMode(Enum):
    """Protocol dialect spoken by the authority"""

    AAD = "AAD"
    OIDC = "OIDC"
