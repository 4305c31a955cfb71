"""Crypto capability interface and its PyJWT-backed implementation"""

from .default_crypto import DefaultCryptoProvider
from .interface import CryptoProvider
from .pop_token_generator import PopTokenGenerator

__all__ = ["CryptoProvider", "DefaultCryptoProvider", "PopTokenGenerator"]
