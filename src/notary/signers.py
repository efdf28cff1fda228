"""Signature algorithms for tokens.

A signer is a named algorithm that produces and checks a signature over a
byte string given a key. Signers do not hold key material: the key is passed
to every call, so a single signer instance can be shared freely across
threads. The closed set of variants is `HMACSigner`, `RSASigner`, and
`ECDSASigner`, each carrying its digest algorithm as data.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from cryptography.hazmat.primitives.serialization import (
    load_der_private_key,
    load_der_public_key,
)

from .constants import (
    EC_PRIVATE_KEY_PEM_TYPE,
    PUBLIC_KEY_PEM_TYPE,
    RSA_PRIVATE_KEY_PEM_TYPE,
)
from .exceptions import (
    HashUnavailableError,
    InvalidKeyError,
    InvalidSignatureError,
)
from .util import constant_time_compare, decode_pem_block, key_to_bytes

__all__ = [
    "ECDSASigner",
    "ES256",
    "ES384",
    "ES512",
    "HMACSigner",
    "HS256",
    "HS384",
    "HS512",
    "RSASigner",
    "RS256",
    "RS384",
    "RS512",
    "Signer",
]


@dataclass(frozen=True)
class Signer(ABC):
    """Base class for signature algorithms."""

    name: str
    """Algorithm name, used as the ``alg`` header value and registry key."""

    hash_algorithm: type[hashes.HashAlgorithm]
    """Digest used by the algorithm."""

    def __str__(self) -> str:
        return self.name

    @abstractmethod
    def sign(self, message: bytes, key: bytes | str) -> bytes:
        """Sign a message.

        Parameters
        ----------
        message
            Data to sign.
        key
            Signing key. Its format depends on the algorithm.

        Returns
        -------
        bytes
            The signature.

        Raises
        ------
        notary.exceptions.HashUnavailableError
            Raised if the digest algorithm is not supported.
        notary.exceptions.InvalidKeyError
            Raised if the key is not valid for this algorithm.
        """

    @abstractmethod
    def verify(
        self, message: bytes, signature: bytes, key: bytes | str
    ) -> None:
        """Verify the signature of a message.

        Parameters
        ----------
        message
            Data that was signed.
        signature
            Signature to check.
        key
            Verification key. Its format depends on the algorithm.

        Raises
        ------
        notary.exceptions.HashUnavailableError
            Raised if the digest algorithm is not supported.
        notary.exceptions.InvalidKeyError
            Raised if the key is not valid for this algorithm.
        notary.exceptions.InvalidSignatureError
            Raised if the signature does not match.
        """


@dataclass(frozen=True)
class HMACSigner(Signer):
    """Symmetric keyed-hash signatures.

    The key is the shared secret as raw bytes of any length.
    """

    def sign(self, message: bytes, key: bytes | str) -> bytes:
        return self._digest(message, key_to_bytes(key))

    def verify(
        self, message: bytes, signature: bytes, key: bytes | str
    ) -> None:
        digest = self._digest(message, key_to_bytes(key))
        if not constant_time_compare(signature, digest):
            raise InvalidSignatureError("Signature does not match")

    def _digest(self, message: bytes, key: bytes) -> bytes:
        try:
            h = hmac.HMAC(key, self.hash_algorithm())
        except UnsupportedAlgorithm as e:
            msg = f"{self.hash_algorithm.name} is not available for {self}"
            raise HashUnavailableError(msg) from e
        h.update(message)
        return h.finalize()


@dataclass(frozen=True)
class RSASigner(Signer):
    """RSA signatures with PKCS#1 v1.5 padding.

    Signing requires a PEM-encoded ``RSA PRIVATE KEY`` (PKCS#1) and
    verification a PEM-encoded ``PUBLIC KEY`` (SubjectPublicKeyInfo).
    """

    def sign(self, message: bytes, key: bytes | str) -> bytes:
        private_key = self._load_private_key(key_to_bytes(key))
        try:
            return private_key.sign(
                message, padding.PKCS1v15(), self.hash_algorithm()
            )
        except UnsupportedAlgorithm as e:
            msg = f"{self.hash_algorithm.name} is not available for {self}"
            raise HashUnavailableError(msg) from e

    def verify(
        self, message: bytes, signature: bytes, key: bytes | str
    ) -> None:
        public_key = self._load_public_key(key_to_bytes(key))
        try:
            public_key.verify(
                signature, message, padding.PKCS1v15(), self.hash_algorithm()
            )
        except UnsupportedAlgorithm as e:
            msg = f"{self.hash_algorithm.name} is not available for {self}"
            raise HashUnavailableError(msg) from e
        except (InvalidSignature, ValueError) as e:
            raise InvalidSignatureError("Signature does not match") from e

    @staticmethod
    def _load_private_key(pem: bytes) -> rsa.RSAPrivateKey:
        der = decode_pem_block(pem, RSA_PRIVATE_KEY_PEM_TYPE)
        try:
            private_key = load_der_private_key(der, password=None)
        except (TypeError, ValueError, UnsupportedAlgorithm) as e:
            raise InvalidKeyError("Invalid RSA private key") from e
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise InvalidKeyError("Key is not an RSA private key")
        return private_key

    @staticmethod
    def _load_public_key(pem: bytes) -> rsa.RSAPublicKey:
        der = decode_pem_block(pem, PUBLIC_KEY_PEM_TYPE)
        try:
            public_key = load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise InvalidKeyError("Invalid RSA public key") from e
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise InvalidKeyError("Key is not an RSA public key")
        return public_key


@dataclass(frozen=True)
class ECDSASigner(Signer):
    """ECDSA signatures in fixed-width ``r || s`` form.

    Signing requires a PEM-encoded ``EC PRIVATE KEY`` (SEC1) and verification
    a PEM-encoded ``PUBLIC KEY`` (SubjectPublicKeyInfo). The curve is taken
    from the key.

    Notes
    -----
    The signature is not the ASN.1 DER structure produced by most ECDSA
    libraries. Each of r and s is left-padded with zeroes to the byte size of
    the curve and the two are concatenated, so every valid signature for a
    given curve has the same length. Verification rejects any signature of
    the wrong length before doing curve arithmetic.
    """

    def sign(self, message: bytes, key: bytes | str) -> bytes:
        private_key = self._load_private_key(key_to_bytes(key))
        try:
            der = private_key.sign(message, ec.ECDSA(self.hash_algorithm()))
        except UnsupportedAlgorithm as e:
            msg = f"{self.hash_algorithm.name} is not available for {self}"
            raise HashUnavailableError(msg) from e
        r, s = decode_dss_signature(der)
        size = self._key_size(private_key.curve)
        return r.to_bytes(size, byteorder="big") + s.to_bytes(
            size, byteorder="big"
        )

    def verify(
        self, message: bytes, signature: bytes, key: bytes | str
    ) -> None:
        public_key = self._load_public_key(key_to_bytes(key))
        size = self._key_size(public_key.curve)
        if len(signature) != 2 * size:
            raise InvalidSignatureError("Signature has wrong length")
        r = int.from_bytes(signature[:size], byteorder="big")
        s = int.from_bytes(signature[size:], byteorder="big")
        try:
            public_key.verify(
                encode_dss_signature(r, s),
                message,
                ec.ECDSA(self.hash_algorithm()),
            )
        except UnsupportedAlgorithm as e:
            msg = f"{self.hash_algorithm.name} is not available for {self}"
            raise HashUnavailableError(msg) from e
        except (InvalidSignature, ValueError) as e:
            raise InvalidSignatureError("Signature does not match") from e

    @staticmethod
    def _key_size(curve: ec.EllipticCurve) -> int:
        """Size in bytes of each of r and s for a curve."""
        return (curve.key_size + 7) // 8

    @staticmethod
    def _load_private_key(pem: bytes) -> ec.EllipticCurvePrivateKey:
        der = decode_pem_block(pem, EC_PRIVATE_KEY_PEM_TYPE)
        try:
            private_key = load_der_private_key(der, password=None)
        except (TypeError, ValueError, UnsupportedAlgorithm) as e:
            raise InvalidKeyError("Invalid ECDSA private key") from e
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise InvalidKeyError("Key is not an ECDSA private key")
        return private_key

    @staticmethod
    def _load_public_key(pem: bytes) -> ec.EllipticCurvePublicKey:
        der = decode_pem_block(pem, PUBLIC_KEY_PEM_TYPE)
        try:
            public_key = load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise InvalidKeyError("Invalid ECDSA public key") from e
        if not isinstance(public_key, ec.EllipticCurvePublicKey):
            raise InvalidKeyError("Key is not an ECDSA public key")
        return public_key


HS256 = HMACSigner("HS256", hashes.SHA256)
"""HMAC using SHA-256."""

HS384 = HMACSigner("HS384", hashes.SHA384)
"""HMAC using SHA-384."""

HS512 = HMACSigner("HS512", hashes.SHA512)
"""HMAC using SHA-512."""

RS256 = RSASigner("RS256", hashes.SHA256)
"""RSA PKCS#1 v1.5 using SHA-256."""

RS384 = RSASigner("RS384", hashes.SHA384)
"""RSA PKCS#1 v1.5 using SHA-384."""

RS512 = RSASigner("RS512", hashes.SHA512)
"""RSA PKCS#1 v1.5 using SHA-512."""

ES256 = ECDSASigner("ES256", hashes.SHA256)
"""ECDSA using SHA-256."""

ES384 = ECDSASigner("ES384", hashes.SHA384)
"""ECDSA using SHA-384."""

ES512 = ECDSASigner("ES512", hashes.SHA512)
"""ECDSA using SHA-512."""
