"""Verify a token."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from structlog.stdlib import BoundLogger

from .config import VerifierConfig
from .exceptions import InvalidConfigError, NotaryError
from .registry import SignerRegistry, default_registry
from .token import Token, get_unverified_header, parse_with_key_func

__all__ = ["TokenVerifier"]


class TokenVerifier:
    """Verifies the validity of a token.

    The permitted algorithms are fixed by the configuration. The key is
    chosen by the ``kid`` header of the token when it names a configured key,
    and is otherwise the default key.

    Parameters
    ----------
    config
        Configuration parameters for the verifier.
    logger
        Logger to use to report status information. Defaults to the
        ``notary`` logger.
    registry
        Registry used to look up the configured algorithms.
    """

    def __init__(
        self,
        config: VerifierConfig,
        logger: BoundLogger | None = None,
        *,
        registry: SignerRegistry = default_registry,
    ) -> None:
        self._config = config
        self._logger = logger or structlog.get_logger("notary")
        self._signers = registry.select(config.algorithms)

    def get_unverified_header(self, encoded: str) -> dict[str, Any]:
        """Return the header of a token without verifying it.

        Parameters
        ----------
        encoded
            Compact token.

        Returns
        -------
        dict
            Decoded header. Nothing in it can be trusted.

        Raises
        ------
        notary.exceptions.MalformedTokenError
            Raised if the token is not in compact form.
        """
        return get_unverified_header(encoded)

    def verify_token(
        self, encoded: str, *, now: datetime | None = None
    ) -> Token:
        """Verify a token.

        Parameters
        ----------
        encoded
            Compact token.
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
            Raised if the token does not verify.
        """
        try:
            token = parse_with_key_func(
                self._signers, encoded, self._get_key, now=now
            )
        except NotaryError as e:
            self._logger.warning(
                "Token verification failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        self._logger.debug(
            "Verified token",
            alg=token.header["alg"],
            kid=token.header.get("kid"),
        )
        return token

    def _get_key(self, token: Token) -> bytes:
        """Select the verification key from the unverified header."""
        key_id = token.header.get("kid")
        if key_id is not None and not isinstance(key_id, str):
            key_id = None
        try:
            return self._config.key_for(key_id)
        except OSError as e:
            msg = f"Cannot read key file {self._config.key_file}: {e}"
            raise InvalidConfigError(msg) from e
