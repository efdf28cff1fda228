"""Token issuer."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

import structlog
from safir.datetime import current_datetime
from structlog.stdlib import BoundLogger

from .config import IssuerConfig
from .exceptions import InvalidConfigError
from .registry import SignerRegistry, default_registry
from .token import Token

__all__ = ["TokenIssuer"]


class TokenIssuer:
    """Issuing new tokens.

    Signs tokens with the configured algorithm and key, adding the standard
    time claims so that every issued token carries a validity window.

    Parameters
    ----------
    config
        Configuration parameters for the issuer.
    logger
        Logger to use to report status information. Defaults to the
        ``notary`` logger.
    registry
        Registry used to look up the configured algorithm.
    """

    def __init__(
        self,
        config: IssuerConfig,
        logger: BoundLogger | None = None,
        *,
        registry: SignerRegistry = default_registry,
    ) -> None:
        self._config = config
        self._logger = logger or structlog.get_logger("notary")
        self._signer = registry.get(config.algorithm)
        try:
            self._key = config.load_key()
        except OSError as e:
            msg = f"Cannot read key file {config.key_file}: {e}"
            raise InvalidConfigError(msg) from e

    def issue_token(
        self,
        claims: Mapping[str, Any] | None = None,
        *,
        lifetime: timedelta | None = None,
    ) -> str:
        """Issue a new token.

        Parameters
        ----------
        claims
            Application claims to include. These may override the ``iss``
            claim but not the time claims.
        lifetime
            Lifetime of the token. Defaults to the configured lifetime. Must
            be positive.

        Returns
        -------
        str
            The signed compact token.

        Raises
        ------
        notary.exceptions.NotaryError
            Raised if the token cannot be signed.
        ValueError
            Raised if the lifetime is not positive.
        """
        if lifetime is None:
            lifetime = self._config.lifetime
        elif lifetime <= timedelta(seconds=0):
            raise ValueError(f"Token lifetime must be positive: {lifetime}")
        now = current_datetime()
        expires = now + lifetime
        payload: dict[str, Any] = {}
        if self._config.issuer:
            payload["iss"] = self._config.issuer
        payload.update(claims or {})
        payload["iat"] = int(now.timestamp())
        payload["nbf"] = int(now.timestamp())
        payload["exp"] = int(expires.timestamp())

        token = Token(claims=payload)
        if self._config.key_id:
            token.header["kid"] = self._config.key_id
        encoded = token.sign(self._key, self._signer)

        self._logger.debug(
            "Issued token",
            alg=self._signer.name,
            kid=self._config.key_id,
            expires=payload["exp"],
        )
        return encoded
