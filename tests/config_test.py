"""Test configuration parsing."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import SecretStr, ValidationError

from notary.config import IssuerConfig, VerifierConfig
from notary.constants import DEFAULT_LIFETIME
from notary.exceptions import UnknownKeyIdError

from .support.constants import TEST_RSA_KEYPAIR


def test_issuer_config() -> None:
    config = IssuerConfig(algorithm="HS256", key=SecretStr("secret"))
    assert config.load_key() == b"secret"
    assert config.lifetime == DEFAULT_LIFETIME
    assert config.key_id is None
    assert config.issuer is None


def test_issuer_config_key_file(tmp_path: Path) -> None:
    key_path = tmp_path / "signing.pem"
    key_path.write_bytes(TEST_RSA_KEYPAIR.private_key_as_pem())
    config = IssuerConfig(algorithm="RS256", key_file=key_path)
    assert config.load_key() == TEST_RSA_KEYPAIR.private_key_as_pem()


def test_issuer_config_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    key_path = tmp_path / "signing.pem"
    key_path.write_bytes(TEST_RSA_KEYPAIR.private_key_as_pem())
    monkeypatch.setenv("NOTARY_ISSUER_ALGORITHM", "RS256")
    monkeypatch.setenv("NOTARY_ISSUER_KEY_FILE", str(key_path))
    monkeypatch.setenv("NOTARY_ISSUER_KEY_ID", "some-kid")
    monkeypatch.setenv("NOTARY_ISSUER_ISSUER", "https://example.com/")
    monkeypatch.setenv("NOTARY_ISSUER_LIFETIME", "1h")

    config = IssuerConfig()
    assert config.algorithm == "RS256"
    assert config.key_file == key_path
    assert config.key_id == "some-kid"
    assert config.issuer == "https://example.com/"
    assert config.lifetime == timedelta(hours=1)


def test_issuer_config_invalid() -> None:
    with pytest.raises(ValidationError):
        IssuerConfig(algorithm="HS256")
    with pytest.raises(ValidationError):
        IssuerConfig(
            algorithm="HS256",
            key=SecretStr("secret"),
            key_file=Path("/nonexistent"),
        )
    with pytest.raises(ValidationError):
        IssuerConfig(algorithm="none", key=SecretStr("secret"))
    with pytest.raises(ValidationError):
        IssuerConfig(algorithm="hs256", key=SecretStr("secret"))
    with pytest.raises(ValidationError):
        IssuerConfig(
            algorithm="HS256",
            key=SecretStr("secret"),
            lifetime=timedelta(seconds=0),
        )


def test_verifier_config() -> None:
    config = VerifierConfig(
        algorithms=["HS256", "HS512"], key=SecretStr("secret")
    )
    assert config.algorithms == ["HS256", "HS512"]
    assert config.key_for(None) == b"secret"
    assert config.key_for("unknown") == b"secret"


def test_verifier_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    public_key = TEST_RSA_KEYPAIR.public_key_as_pem().decode()
    monkeypatch.setenv("NOTARY_VERIFIER_ALGORITHMS", '["RS256", "ES256"]')
    monkeypatch.setenv("NOTARY_VERIFIER_KEY", public_key)

    config = VerifierConfig()
    assert config.algorithms == ["RS256", "ES256"]
    assert config.key_for(None) == TEST_RSA_KEYPAIR.public_key_as_pem()


def test_verifier_config_keys() -> None:
    config = VerifierConfig(
        algorithms=["HS256"],
        keys={"one": SecretStr("first"), "two": SecretStr("second")},
    )
    assert config.key_for("one") == b"first"
    assert config.key_for("two") == b"second"
    with pytest.raises(UnknownKeyIdError):
        config.key_for("three")
    with pytest.raises(UnknownKeyIdError):
        config.key_for(None)

    config = VerifierConfig(
        algorithms=["HS256"],
        key=SecretStr("default"),
        keys={"one": SecretStr("first")},
    )
    assert config.key_for("one") == b"first"
    assert config.key_for("three") == b"default"


def test_verifier_config_invalid() -> None:
    with pytest.raises(ValidationError):
        VerifierConfig(algorithms=["HS256"])
    with pytest.raises(ValidationError):
        VerifierConfig(algorithms=[], key=SecretStr("secret"))
    with pytest.raises(ValidationError):
        VerifierConfig(algorithms=["HS256", "XX999"], key=SecretStr("secret"))
    with pytest.raises(ValidationError):
        VerifierConfig(
            algorithms=["HS256"],
            key=SecretStr("secret"),
            key_file=Path("/nonexistent"),
        )
