"""General utility functions."""

from __future__ import annotations

import base64
import binascii
import hmac
import re

from .exceptions import InvalidKeyError, MalformedEncodingError

__all__ = [
    "add_padding",
    "base64url_decode",
    "base64url_encode",
    "constant_time_compare",
    "decode_pem_block",
    "key_to_bytes",
]

_BASE64URL_REGEX = re.compile(r"[A-Za-z0-9_-]*")
"""Characters permitted in padding-free URL-safe base64."""

_PEM_REGEX = re.compile(
    rb"-----BEGIN (?P<type>[^-\r\n]+)-----(?P<body>.*?)"
    rb"-----END (?P=type)-----",
    re.DOTALL,
)
"""First PEM block in a byte string, with its type and base64 body."""


def add_padding(encoded: str) -> str:
    """Add padding to base64 encoded bytes.

    Parameters
    ----------
    encoded
        A base64-encoded string, possibly with the padding removed.

    Returns
    -------
    str
        A correctly-padded version of the encoded string.
    """
    underflow = len(encoded) % 4
    if underflow:
        return encoded + ("=" * (4 - underflow))
    else:
        return encoded


def base64url_encode(data: bytes) -> str:
    """Encode bytes in URL-safe base64 with the padding removed.

    This is the encoding of RFC 4648 section 3.2 used for every segment of a
    compact token.

    Parameters
    ----------
    data
        Data to encode.

    Returns
    -------
    str
        The encoded data.
    """
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def base64url_decode(encoded: str) -> bytes:
    """Decode URL-safe base64 with the padding removed.

    Padding is neither required nor accepted. Only the URL-safe alphabet is
    accepted, so standard base64 characters such as ``+`` and ``/`` are
    rejected rather than silently translated or discarded.

    Parameters
    ----------
    encoded
        Padding-free URL-safe base64 string.

    Returns
    -------
    bytes
        The decoded data.

    Raises
    ------
    notary.exceptions.MalformedEncodingError
        Raised if the string is not valid padding-free URL-safe base64.
    """
    if not _BASE64URL_REGEX.fullmatch(encoded) or len(encoded) % 4 == 1:
        raise MalformedEncodingError("Invalid base64url encoding")
    try:
        return base64.urlsafe_b64decode(add_padding(encoded))
    except (binascii.Error, ValueError) as e:
        raise MalformedEncodingError("Invalid base64url encoding") from e


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without leaking timing information.

    Lengths of the inputs are not secret (they are digest lengths), so a
    length mismatch may return early.
    """
    return hmac.compare_digest(a, b)


def decode_pem_block(data: bytes, pem_type: str) -> bytes:
    """Extract the DER contents of the first PEM block.

    Parameters
    ----------
    data
        PEM-encoded data.
    pem_type
        Required type of the block, such as ``PUBLIC KEY``.

    Returns
    -------
    bytes
        DER-encoded contents of the block.

    Raises
    ------
    notary.exceptions.InvalidKeyError
        Raised if there is no PEM block, if the first block is of a different
        type, or if the block has headers or a body that is not base64.
    """
    match = _PEM_REGEX.search(data)
    if not match:
        raise InvalidKeyError(f"Key is not a PEM-encoded {pem_type}")
    found_type = match.group("type").decode(errors="replace")
    if found_type != pem_type:
        msg = f"Key is a PEM-encoded {found_type}, not {pem_type}"
        raise InvalidKeyError(msg)

    # Encrypted PEM blocks carry RFC 1421 headers, which are not supported.
    body = match.group("body")
    if b":" in body:
        raise InvalidKeyError(f"PEM-encoded {pem_type} has headers")
    try:
        return base64.b64decode(b"".join(body.split()), validate=True)
    except binascii.Error as e:
        raise InvalidKeyError(f"Invalid PEM-encoded {pem_type}") from e


def key_to_bytes(key: bytes | str) -> bytes:
    """Convert key material to bytes, encoding strings as UTF-8."""
    if isinstance(key, str):
        return key.encode()
    return key
