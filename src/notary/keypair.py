"""RSA and ECDSA key pair handling.

Provides just enough key serialization to produce keys in the PEM formats the
asymmetric signers accept: ``RSA PRIVATE KEY`` (PKCS#1), ``EC PRIVATE KEY``
(SEC1), and ``PUBLIC KEY`` (SubjectPublicKeyInfo).
"""

from __future__ import annotations

from typing import Self

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
    load_pem_private_key,
)

__all__ = ["ECKeyPair", "RSAKeyPair"]


class RSAKeyPair:
    """An RSA key pair with some simple helper functions.

    Notes
    -----
    Created by calling :py:meth:`~RSAKeyPair.generate` or
    :py:meth:`~RSAKeyPair.from_pem` rather than the constructor.
    """

    @classmethod
    def from_pem(cls, pem: bytes) -> Self:
        """Import an RSA key pair from a PEM-encoded private key.

        Parameters
        ----------
        pem
            The PEM-encoded key in PKCS#1 or PKCS#8 format (must not be
            password-protected).

        Returns
        -------
        RSAKeyPair
            The corresponding key pair.

        Raises
        ------
        cryptography.exceptions.UnsupportedAlgorithm
            Raised if the provided key is not an RSA private key.
        """
        private_key = load_pem_private_key(pem, password=None)
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise UnsupportedAlgorithm("Key is not an RSA private key")
        return cls(private_key)

    @classmethod
    def generate(cls, key_size: int = 2048) -> Self:
        """Generate a new RSA key pair.

        Parameters
        ----------
        key_size
            Size of the modulus in bits.

        Returns
        -------
        RSAKeyPair
            Newly-generated key pair.
        """
        private_key = rsa.generate_private_key(
            public_exponent=65537, key_size=key_size
        )
        return cls(private_key)

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        self.private_key = private_key
        self._private_key_as_pem: bytes | None = None
        self._public_key_as_pem: bytes | None = None

    def private_key_as_pem(self) -> bytes:
        """Return the serialized private key.

        Returns
        -------
        bytes
            Private key as an unencrypted PKCS#1 ``RSA PRIVATE KEY`` block.
        """
        if not self._private_key_as_pem:
            self._private_key_as_pem = self.private_key.private_bytes(
                Encoding.PEM, PrivateFormat.TraditionalOpenSSL, NoEncryption()
            )
        return self._private_key_as_pem

    def public_key_as_pem(self) -> bytes:
        """Return the PEM-encoded public key.

        Returns
        -------
        bytes
            The public key in PEM encoding and SubjectPublicKeyInfo format.
        """
        if not self._public_key_as_pem:
            public_key = self.private_key.public_key()
            self._public_key_as_pem = public_key.public_bytes(
                Encoding.PEM, PublicFormat.SubjectPublicKeyInfo
            )
        return self._public_key_as_pem


class ECKeyPair:
    """An elliptic curve key pair for ECDSA signatures.

    Notes
    -----
    Created by calling :py:meth:`~ECKeyPair.generate` or
    :py:meth:`~ECKeyPair.from_pem` rather than the constructor.
    """

    @classmethod
    def from_pem(cls, pem: bytes) -> Self:
        """Import an EC key pair from a PEM-encoded private key.

        Parameters
        ----------
        pem
            The PEM-encoded key in SEC1 or PKCS#8 format (must not be
            password-protected).

        Returns
        -------
        ECKeyPair
            The corresponding key pair.

        Raises
        ------
        cryptography.exceptions.UnsupportedAlgorithm
            Raised if the provided key is not an elliptic curve private key.
        """
        private_key = load_pem_private_key(pem, password=None)
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise UnsupportedAlgorithm("Key is not an EC private key")
        return cls(private_key)

    @classmethod
    def generate(cls, curve: ec.EllipticCurve | None = None) -> Self:
        """Generate a new EC key pair.

        Parameters
        ----------
        curve
            Curve to use. Defaults to P-256, which matches ``ES256``.

        Returns
        -------
        ECKeyPair
            Newly-generated key pair.
        """
        private_key = ec.generate_private_key(curve or ec.SECP256R1())
        return cls(private_key)

    def __init__(self, private_key: ec.EllipticCurvePrivateKey) -> None:
        self.private_key = private_key
        self._private_key_as_pem: bytes | None = None
        self._public_key_as_pem: bytes | None = None

    @property
    def curve(self) -> ec.EllipticCurve:
        """Curve of the key pair."""
        return self.private_key.curve

    def private_key_as_pem(self) -> bytes:
        """Return the private key as an unencrypted SEC1 ``EC PRIVATE KEY``."""
        if not self._private_key_as_pem:
            self._private_key_as_pem = self.private_key.private_bytes(
                Encoding.PEM, PrivateFormat.TraditionalOpenSSL, NoEncryption()
            )
        return self._private_key_as_pem

    def public_key_as_pem(self) -> bytes:
        """Return the public key as a SubjectPublicKeyInfo ``PUBLIC KEY``."""
        if not self._public_key_as_pem:
            public_key = self.private_key.public_key()
            self._public_key_as_pem = public_key.public_bytes(
                Encoding.PEM, PublicFormat.SubjectPublicKeyInfo
            )
        return self._public_key_as_pem
