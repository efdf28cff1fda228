"""Configuration for token issuers and verifiers.

Both configuration models are Pydantic settings, so every setting may be
given either to the constructor or through an environment variable. Issuer
settings use the ``NOTARY_ISSUER_`` prefix (``NOTARY_ISSUER_ALGORITHM``, for
example) and verifier settings the ``NOTARY_VERIFIER_`` prefix.

Key material may be given inline as a secret or as a path to a file. Inline
keys are treated as UTF-8 text, which suits PEM-encoded keys and printable
shared secrets; use a file for binary HMAC secrets.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Self

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from safir.pydantic import HumanTimedelta

from .constants import DEFAULT_LIFETIME
from .exceptions import UnknownKeyIdError
from .registry import default_registry

__all__ = ["IssuerConfig", "VerifierConfig"]


def _validate_algorithm(alg: str) -> str:
    if alg not in default_registry:
        raise ValueError(f"unknown algorithm {alg}")
    return alg


def _read_key(key: SecretStr | None, key_file: Path | None) -> bytes:
    if key is not None:
        return key.get_secret_value().encode()
    if key_file is not None:
        return key_file.read_bytes()
    raise ValueError("No key configured")


class IssuerConfig(BaseSettings):
    """Configuration for issuing tokens."""

    model_config = SettingsConfigDict(
        env_prefix="NOTARY_ISSUER_", extra="forbid"
    )

    algorithm: str = Field(
        ...,
        title="Signing algorithm",
        description="Name of the algorithm used to sign tokens, like RS256",
    )

    key: SecretStr | None = Field(
        None,
        title="Signing key",
        description=(
            "HMAC secret, or PEM-encoded private key for RSA and ECDSA. Only"
            " one of key and key_file may be set."
        ),
    )

    key_file: Path | None = Field(
        None,
        title="Signing key file",
        description="File containing the signing key",
    )

    key_id: str | None = Field(
        None,
        title="Key ID",
        description="If set, added to the header of issued tokens as kid",
    )

    issuer: str | None = Field(
        None,
        title="Issuer",
        description="If set, added to issued tokens as the iss claim",
    )

    lifetime: HumanTimedelta = Field(
        DEFAULT_LIFETIME,
        title="Token lifetime",
        description="Default lifetime of issued tokens",
    )

    @field_validator("algorithm")
    @classmethod
    def _validate_algorithm(cls, v: str) -> str:
        return _validate_algorithm(v)

    @field_validator("lifetime")
    @classmethod
    def _validate_lifetime(cls, v: timedelta) -> timedelta:
        if v <= timedelta(seconds=0):
            raise ValueError("must be positive")
        return v

    @model_validator(mode="after")
    def _validate_key(self) -> Self:
        """Ensure exactly one source of key material is configured."""
        if self.key is None and self.key_file is None:
            raise ValueError("one of key or key_file must be set")
        if self.key is not None and self.key_file is not None:
            raise ValueError("only one of key or key_file may be set")
        return self

    def load_key(self) -> bytes:
        """Return the signing key.

        Returns
        -------
        bytes
            Key material, read from the file if ``key_file`` is set.
        """
        return _read_key(self.key, self.key_file)


class VerifierConfig(BaseSettings):
    """Configuration for verifying tokens."""

    model_config = SettingsConfigDict(
        env_prefix="NOTARY_VERIFIER_", extra="forbid"
    )

    algorithms: list[str] = Field(
        ...,
        title="Permitted algorithms",
        description=(
            "Algorithms a token may be signed with. Tokens whose alg header"
            " is not in this list are rejected."
        ),
        min_length=1,
    )

    key: SecretStr | None = Field(
        None,
        title="Default verification key",
        description=(
            "HMAC secret, or PEM-encoded public key for RSA and ECDSA, used"
            " for tokens whose kid is not listed in keys"
        ),
    )

    key_file: Path | None = Field(
        None,
        title="Default verification key file",
        description="File containing the default verification key",
    )

    keys: dict[str, SecretStr] = Field(
        {},
        title="Verification keys by key ID",
        description="Keys selected by the kid header of the token",
    )

    @field_validator("algorithms")
    @classmethod
    def _validate_algorithms(cls, v: list[str]) -> list[str]:
        for alg in v:
            _validate_algorithm(alg)
        return v

    @model_validator(mode="after")
    def _validate_keys(self) -> Self:
        """Ensure some key material is configured."""
        if self.key is not None and self.key_file is not None:
            raise ValueError("only one of key or key_file may be set")
        if self.key is None and self.key_file is None and not self.keys:
            raise ValueError("no verification keys configured")
        return self

    def key_for(self, key_id: str | None) -> bytes:
        """Return the verification key for a key ID.

        Parameters
        ----------
        key_id
            The ``kid`` header of the token, if any.

        Returns
        -------
        bytes
            Key registered under that ID, or else the default key.

        Raises
        ------
        notary.exceptions.UnknownKeyIdError
            Raised if the key ID is not known and there is no default key.
        """
        if key_id is not None and key_id in self.keys:
            return self.keys[key_id].get_secret_value().encode()
        if self.key is None and self.key_file is None:
            raise UnknownKeyIdError(f"No verification key for kid {key_id}")
        return _read_key(self.key, self.key_file)
