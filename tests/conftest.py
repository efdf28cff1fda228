"""Test fixtures."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from notary.keypair import ECKeyPair, RSAKeyPair

from .support.constants import TEST_EC_KEYPAIR, TEST_RSA_KEYPAIR


@pytest.fixture(autouse=True)
def environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove any notary settings from the environment."""
    for variable in (
        "NOTARY_ISSUER_ALGORITHM",
        "NOTARY_ISSUER_KEY",
        "NOTARY_ISSUER_KEY_FILE",
        "NOTARY_ISSUER_KEY_ID",
        "NOTARY_ISSUER_ISSUER",
        "NOTARY_ISSUER_LIFETIME",
        "NOTARY_VERIFIER_ALGORITHMS",
        "NOTARY_VERIFIER_KEY",
        "NOTARY_VERIFIER_KEY_FILE",
        "NOTARY_VERIFIER_KEYS",
    ):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture
def ec_keypair() -> ECKeyPair:
    return TEST_EC_KEYPAIR


@pytest.fixture
def now() -> datetime:
    """Fixed time used for claim validation."""
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def rsa_keypair() -> RSAKeyPair:
    return TEST_RSA_KEYPAIR
