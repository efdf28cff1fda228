"""Signing and verification of compact JSON tokens."""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    ClaimExpiredError,
    ClaimNotBeforeError,
    HashUnavailableError,
    HeaderAlgError,
    HeaderTypError,
    InvalidClaimsError,
    InvalidConfigError,
    InvalidKeyError,
    InvalidSignatureError,
    MalformedEncodingError,
    MalformedTokenError,
    NoSignerError,
    NotaryError,
    SerializationError,
    SignerRegistrationError,
    UnknownAlgorithmError,
    UnknownKeyIdError,
)
from .registry import SignerRegistry, default_registry
from .signers import (
    ES256,
    ES384,
    ES512,
    HS256,
    HS384,
    HS512,
    RS256,
    RS384,
    RS512,
    ECDSASigner,
    HMACSigner,
    RSASigner,
    Signer,
)
from .token import (
    KeyFunc,
    Token,
    get_unverified_header,
    parse,
    parse_with_key_func,
)

__all__ = [
    "ES256",
    "ES384",
    "ES512",
    "HS256",
    "HS384",
    "HS512",
    "RS256",
    "RS384",
    "RS512",
    "ClaimExpiredError",
    "ClaimNotBeforeError",
    "ECDSASigner",
    "HMACSigner",
    "HashUnavailableError",
    "HeaderAlgError",
    "HeaderTypError",
    "InvalidClaimsError",
    "InvalidConfigError",
    "InvalidKeyError",
    "InvalidSignatureError",
    "KeyFunc",
    "MalformedEncodingError",
    "MalformedTokenError",
    "NoSignerError",
    "NotaryError",
    "RSASigner",
    "SerializationError",
    "Signer",
    "SignerRegistrationError",
    "SignerRegistry",
    "Token",
    "UnknownAlgorithmError",
    "UnknownKeyIdError",
    "__version__",
    "default_registry",
    "get_unverified_header",
    "parse",
    "parse_with_key_func",
]

__version__: str
"""The version string of notary (PEP 440 / SemVer compatible)."""

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0"
