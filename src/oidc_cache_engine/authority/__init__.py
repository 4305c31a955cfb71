"""Authority model and the process-wide trusted authority registry"""

from .authority import Authority
from .authority_type import AuthorityType, ProtocolMode
from .trusted_authority import CloudDiscoveryMetadata, TrustedAuthorityRegistry, trusted_authorities

__all__ = [
    "Authority",
    "AuthorityType",
    "CloudDiscoveryMetadata",
    "ProtocolMode",
    "TrustedAuthorityRegistry",
    "trusted_authorities",
]
