"""Constants for notary."""

from datetime import timedelta

__all__ = [
    "DEFAULT_LIFETIME",
    "EC_PRIVATE_KEY_PEM_TYPE",
    "PUBLIC_KEY_PEM_TYPE",
    "RSA_PRIVATE_KEY_PEM_TYPE",
    "SEPARATOR",
    "TOKEN_TYPE",
]

DEFAULT_LIFETIME = timedelta(days=1)
"""Default lifetime of tokens created by `~notary.issuer.TokenIssuer`."""

EC_PRIVATE_KEY_PEM_TYPE = "EC PRIVATE KEY"
"""PEM block type of an ECDSA private key in SEC1 format."""

PUBLIC_KEY_PEM_TYPE = "PUBLIC KEY"
"""PEM block type of an RSA or ECDSA public key in SubjectPublicKeyInfo
format."""

RSA_PRIVATE_KEY_PEM_TYPE = "RSA PRIVATE KEY"
"""PEM block type of an RSA private key in PKCS#1 format."""

SEPARATOR = "."
"""Separator between the segments of a compact token."""

TOKEN_TYPE = "JWT"
"""Required value of the ``typ`` header field."""
