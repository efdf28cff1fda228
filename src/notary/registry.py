"""Lookup of signers by algorithm name.

The registry maps algorithm names to signers. It is used when signing, where
the algorithm is chosen by the caller, and to turn a list of algorithm names
chosen by the caller into an allowed set of signers for verification. It is
never consulted with the ``alg`` value of an untrusted token header.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .exceptions import SignerRegistrationError, UnknownAlgorithmError
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
    Signer,
)

__all__ = ["SignerRegistry", "default_registry"]


class SignerRegistry:
    """Table of signers keyed by algorithm name.

    Parameters
    ----------
    signers
        Initial signers to register.

    Notes
    -----
    The registry is meant to be populated once at startup. Registering the
    same name twice, or registering after `freeze` has been called, raises
    `~notary.exceptions.SignerRegistrationError` instead of replacing the
    existing entry.
    """

    def __init__(self, signers: Iterable[Signer] = ()) -> None:
        self._signers: dict[str, Signer] = {}
        self._frozen = False
        for signer in signers:
            self.register(signer)

    def __contains__(self, alg: object) -> bool:
        return alg in self._signers

    def __iter__(self) -> Iterator[str]:
        return iter(self._signers)

    def __len__(self) -> int:
        return len(self._signers)

    @property
    def frozen(self) -> bool:
        """Whether the registry rejects further registrations."""
        return self._frozen

    def freeze(self) -> None:
        """Reject any further registrations."""
        self._frozen = True

    def get(self, alg: str) -> Signer:
        """Return the signer for an algorithm name.

        Parameters
        ----------
        alg
            Algorithm name, matched exactly.

        Returns
        -------
        Signer
            The registered signer.

        Raises
        ------
        notary.exceptions.UnknownAlgorithmError
            Raised if no signer is registered under that name.
        """
        try:
            return self._signers[alg]
        except KeyError:
            raise UnknownAlgorithmError(alg) from None

    def register(self, signer: Signer) -> None:
        """Add a signer under its name.

        Parameters
        ----------
        signer
            Signer to add.

        Raises
        ------
        notary.exceptions.SignerRegistrationError
            Raised if the registry is frozen or the name is already taken.
        """
        if self._frozen:
            msg = f"Cannot register {signer.name}: registry is frozen"
            raise SignerRegistrationError(msg)
        if signer.name in self._signers:
            msg = f"Signer for {signer.name} is already registered"
            raise SignerRegistrationError(msg)
        self._signers[signer.name] = signer

    def select(self, algs: Iterable[str]) -> list[Signer]:
        """Return the signers for a list of permitted algorithm names.

        Intended for building the allowed set passed to
        `~notary.token.parse`.

        Parameters
        ----------
        algs
            Algorithm names chosen by the caller.

        Returns
        -------
        list of Signer
            Signers in the same order as the names.

        Raises
        ------
        notary.exceptions.UnknownAlgorithmError
            Raised if any name is not registered.
        """
        return [self.get(alg) for alg in algs]


default_registry = SignerRegistry(
    [HS256, HS384, HS512, RS256, RS384, RS512, ES256, ES384, ES512]
)
"""Process-wide registry holding the built-in signers."""
