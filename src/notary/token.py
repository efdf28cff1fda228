"""Signing and verification of compact tokens.

A compact token is three base64url segments joined by ``.``: the JSON
header, the JSON claims, and the signature. The signature covers the first
two segments exactly as they appear in the token string. Verification works
on those literal segments and never on a re-serialization of the parsed
header and claims, so the JSON key ordering chosen by the signer does not
matter to the verifier.
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, Self

from pydantic import BaseModel, Field
from safir.datetime import current_datetime

from .constants import SEPARATOR, TOKEN_TYPE
from .exceptions import (
    ClaimExpiredError,
    ClaimNotBeforeError,
    HeaderAlgError,
    HeaderTypError,
    InvalidSignatureError,
    MalformedTokenError,
    NoSignerError,
    NotaryError,
    SerializationError,
)
from .registry import SignerRegistry, default_registry
from .signers import Signer
from .util import base64url_decode, base64url_encode

__all__ = [
    "KeyFunc",
    "Token",
    "get_unverified_header",
    "parse",
    "parse_with_key_func",
]


class Token(BaseModel):
    """Header and claims of a token.

    A token is constructed by the caller and turned into its compact form with
    `sign`, or is returned fully verified by `parse` or
    `parse_with_key_func`.
    """

    header: dict[str, Any] = Field(
        default_factory=dict,
        title="Header",
        description="Token header, including typ and alg once signed",
    )

    claims: dict[str, Any] = Field(
        default_factory=dict,
        title="Claims",
        description="Application-defined claims carried by the token",
    )

    @classmethod
    def for_algorithm(cls, alg: str) -> Self:
        """Create an empty token that will be signed with a named algorithm.

        The signer is looked up by name when `sign` is called without an
        explicit signer.

        Parameters
        ----------
        alg
            Name of the signing algorithm, such as ``HS256``.

        Returns
        -------
        Token
            Token with ``typ`` and ``alg`` set in its header.
        """
        return cls(header={"typ": TOKEN_TYPE, "alg": alg})

    def sign(
        self,
        key: bytes | str,
        signer: Signer | str | None = None,
        *,
        registry: SignerRegistry = default_registry,
    ) -> str:
        """Sign the token and return its compact form.

        The ``typ`` and ``alg`` header fields are overwritten to match the
        signer.

        Parameters
        ----------
        key
            Signing key in the format required by the signer.
        signer
            Signer to use, or the name of an algorithm to look up in the
            registry. If not given, the ``alg`` field already in the header
            is looked up in the registry.
        registry
            Registry used to resolve algorithm names.

        Returns
        -------
        str
            The compact token.

        Raises
        ------
        notary.exceptions.NoSignerError
            Raised if no signer was given and the header has no ``alg``.
        notary.exceptions.SerializationError
            Raised if the header or claims cannot be serialized to JSON.
        notary.exceptions.UnknownAlgorithmError
            Raised if an algorithm name is not in the registry.
        """
        if signer is None:
            alg = self.header.get("alg")
            if not isinstance(alg, str):
                raise NoSignerError("No signer configured for token")
            signer = registry.get(alg)
        elif isinstance(signer, str):
            signer = registry.get(signer)

        self.header["typ"] = TOKEN_TYPE
        self.header["alg"] = signer.name
        header = _encode_segment(self.header)
        claims = _encode_segment(self.claims)
        signing_input = header + SEPARATOR + claims
        signature = signer.sign(signing_input.encode(), key)
        return signing_input + SEPARATOR + base64url_encode(signature)


KeyFunc = Callable[[Token], bytes | str]
"""Callback that returns the verification key for a token.

The callback receives a token whose header has been decoded but whose
signature has not been checked and whose claims are still empty.
"""


def get_unverified_header(encoded: str) -> dict[str, Any]:
    """Decode the header of a token without verifying anything.

    Intended only for diagnostics and key lookup. Nothing in the result can
    be trusted.

    Parameters
    ----------
    encoded
        Compact token.

    Returns
    -------
    dict
        Decoded header.

    Raises
    ------
    notary.exceptions.MalformedTokenError
        Raised if the token is not in compact form or its header is not a
        valid JSON object.
    """
    segments = encoded.split(SEPARATOR)
    if len(segments) != 3:
        raise MalformedTokenError("Token does not have three segments")
    return _decode_segment(segments[0], "header")


def parse(
    signer: Signer | Iterable[Signer],
    encoded: str,
    key: bytes | str,
    *,
    now: datetime | None = None,
) -> Token:
    """Verify a token with a fixed key.

    Parameters
    ----------
    signer
        The signer the token must use, or the permitted signers.
    encoded
        Compact token.
    key
        Verification key.
    now
        Time to use for checking ``exp`` and ``nbf``. Defaults to the
        current time.

    Returns
    -------
    Token
        The verified token.

    Raises
    ------
    notary.exceptions.NotaryError
        Raised if the token does not verify. See `parse_with_key_func` for
        the specific exceptions.
    """
    return parse_with_key_func(signer, encoded, lambda _: key, now=now)


def parse_with_key_func(
    signer: Signer | Iterable[Signer],
    encoded: str,
    key_func: KeyFunc,
    *,
    now: datetime | None = None,
) -> Token:
    """Verify a token, using a callback to determine the key.

    The signer is always chosen by the caller. The ``alg`` header of the
    token is only compared with the names of the permitted signers, so a
    token cannot select a verification algorithm or key type the caller did
    not allow.

    Parameters
    ----------
    signer
        The signer the token must use, or the permitted signers. Algorithm
        names are not accepted.
    encoded
        Compact token.
    key_func
        Called with the partially-parsed token to get the verification key.
        Exceptions from the callback propagate unchanged.
    now
        Time to use for checking ``exp`` and ``nbf``. Defaults to the
        current time.

    Returns
    -------
    Token
        The verified token.

    Raises
    ------
    notary.exceptions.ClaimExpiredError
        Raised if the current time is after the ``exp`` claim.
    notary.exceptions.ClaimNotBeforeError
        Raised if the current time is before the ``nbf`` claim.
    notary.exceptions.HeaderAlgError
        Raised if ``alg`` is missing or not a permitted algorithm.
    notary.exceptions.HeaderTypError
        Raised if ``typ`` is missing or not ``JWT``.
    notary.exceptions.InvalidSignatureError
        Raised if the signature does not verify.
    notary.exceptions.MalformedTokenError
        Raised if the token is not in compact form, or if its header or
        claims are not valid JSON objects.
    TypeError
        Raised if ``signer`` is an algorithm name rather than a signer.
    """
    if isinstance(signer, str | bytes):
        msg = f"Expected a Signer or Signers, not {signer!r}"
        raise TypeError(msg)
    segments = encoded.split(SEPARATOR)
    if len(segments) != 3:
        raise MalformedTokenError("Token does not have three segments")
    header_segment, claims_segment, signature_segment = segments

    # Check the header before doing any cryptographic work.
    header = _decode_segment(header_segment, "header")
    if header.get("typ") != TOKEN_TYPE:
        raise HeaderTypError(f"Token typ is not {TOKEN_TYPE}")
    alg = header.get("alg")
    if not isinstance(alg, str):
        raise HeaderAlgError("Token has no alg")
    verifier = _select_signer(signer, alg)

    token = Token(header=header)
    key = key_func(token)

    signing_input = (header_segment + SEPARATOR + claims_segment).encode()
    signature = base64url_decode(signature_segment)
    try:
        verifier.verify(signing_input, signature, key)
    except InvalidSignatureError:
        raise
    except NotaryError as e:
        raise InvalidSignatureError(f"Cannot verify signature: {e}") from e

    # Only now are the claims trustworthy.
    token.claims = _decode_segment(claims_segment, "claims")
    if now is None:
        now = current_datetime()
    _check_times(token.claims, int(now.timestamp()))
    return token


def _check_times(claims: Mapping[str, Any], now: int) -> None:
    """Check the validity window of a token against a single time sample."""
    exp = _numeric_claim(claims, "exp")
    if exp is not None and now > exp:
        raise ClaimExpiredError(exp)
    nbf = _numeric_claim(claims, "nbf")
    if nbf is not None and now < nbf:
        raise ClaimNotBeforeError(nbf)


def _decode_segment(segment: str, name: str) -> dict[str, Any]:
    """Decode a header or claims segment into a JSON object."""
    data = base64url_decode(segment)
    try:
        decoded = json.loads(data, parse_constant=_reject_constant)
    except (RecursionError, ValueError) as e:
        raise MalformedTokenError(f"Token {name} is not valid JSON") from e
    if not isinstance(decoded, dict):
        raise MalformedTokenError(f"Token {name} is not a JSON object")
    return decoded


def _encode_segment(data: Mapping[str, Any]) -> str:
    """Serialize a header or claims mapping into an encoded segment.

    Keys are sorted and no whitespace is used, so the same mapping always
    produces the same segment.
    """
    try:
        encoded = json.dumps(
            data,
            allow_nan=False,
            ensure_ascii=False,
            separators=(",", ":"),
            sort_keys=True,
        ).encode()
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot serialize token: {e}") from e
    return base64url_encode(encoded)


def _numeric_claim(claims: Mapping[str, Any], name: str) -> int | None:
    """Return a time claim as integer seconds, or `None` if not numeric.

    JSON integers are used exactly. JSON floats are truncated toward zero.
    Numbers too large for a float, such as ``1e400``, are rejected the same
    way as the ``Infinity`` literal.
    """
    value = claims.get(name)
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        msg = f"Token {name} claim is not a finite number"
        raise MalformedTokenError(msg)
    return int(value)


def _reject_constant(constant: str) -> Any:
    raise ValueError(f"{constant} is not valid JSON")


def _select_signer(signer: Signer | Iterable[Signer], alg: str) -> Signer:
    """Return the permitted signer whose name matches the header exactly."""
    allowed = [signer] if isinstance(signer, Signer) else list(signer)
    for candidate in allowed:
        if candidate.name == alg:
            return candidate
    expected = ", ".join(s.name for s in allowed)
    raise HeaderAlgError(f"Token alg {alg} is not one of: {expected}")
