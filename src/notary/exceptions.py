"""Exceptions for notary."""

from __future__ import annotations

__all__ = [
    "ClaimExpiredError",
    "ClaimNotBeforeError",
    "HashUnavailableError",
    "HeaderAlgError",
    "HeaderTypError",
    "InvalidClaimsError",
    "InvalidConfigError",
    "InvalidKeyError",
    "InvalidSignatureError",
    "MalformedEncodingError",
    "MalformedTokenError",
    "NoSignerError",
    "NotaryError",
    "SerializationError",
    "SignerRegistrationError",
    "UnknownAlgorithmError",
    "UnknownKeyIdError",
]


class NotaryError(Exception):
    """Base class for all notary exceptions."""


class MalformedTokenError(NotaryError):
    """The token string does not have the compact token format.

    Raised if the token does not split into exactly three segments, if a
    segment is not valid base64url, or if the header or claims segment does
    not decode to a JSON object.
    """


class MalformedEncodingError(MalformedTokenError):
    """A string is not valid padding-free URL-safe base64."""


class HeaderTypError(NotaryError):
    """The token header does not contain a ``typ`` of ``JWT``."""


class HeaderAlgError(NotaryError):
    """The token header ``alg`` is missing or not an expected algorithm."""


class NoSignerError(NotaryError):
    """No signer was configured when signing a token."""


class UnknownAlgorithmError(NoSignerError):
    """No signer is registered for the requested algorithm name."""

    def __init__(self, alg: str) -> None:
        super().__init__(f"No signer registered for algorithm {alg}")
        self.alg = alg


class SignerRegistrationError(NotaryError):
    """A signer could not be added to a registry.

    Registration is a load-time operation. A duplicate name, or a
    registration after the registry has been frozen, is a programming error
    and is reported immediately rather than overwriting an existing entry.
    """


class InvalidKeyError(NotaryError):
    """The key is not a well-formed key of the kind the signer expects."""


class HashUnavailableError(NotaryError):
    """The digest algorithm of a signer is not supported by the backend."""


class InvalidSignatureError(NotaryError):
    """The signature of the token does not verify."""


class InvalidClaimsError(NotaryError):
    """The signature is valid but the token is outside its validity window."""


class ClaimExpiredError(InvalidClaimsError):
    """The current time is after the ``exp`` claim."""

    def __init__(self, exp: int) -> None:
        super().__init__(f"Token expired at {exp}")
        self.exp = exp


class ClaimNotBeforeError(InvalidClaimsError):
    """The current time is before the ``nbf`` claim."""

    def __init__(self, nbf: int) -> None:
        super().__init__(f"Token not valid before {nbf}")
        self.nbf = nbf


class SerializationError(NotaryError):
    """The header or claims cannot be represented as token JSON."""


class UnknownKeyIdError(NotaryError):
    """No verification key is configured for the ``kid`` of the token."""


class InvalidConfigError(NotaryError):
    """The issuer or verifier configuration cannot be used."""
