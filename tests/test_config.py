#!/usr/bin/env python3
"""
Tests for deployment settings
"""

import os

import pytest
from pydantic import ValidationError

from deployment.config import Backend, Settings, get_settings, validate_settings
from deployment.context import TxOptions
from deployment.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep DEPLOY_* variables from the developer's shell out of the tests"""
    for key in list(os.environ):
        if key.startswith("DEPLOY_"):
            monkeypatch.delenv(key)


def make_settings(**kwargs):
    return Settings(_env_file=None, **kwargs)


def test_defaults():
    settings = make_settings()

    assert settings.backend == Backend.BROWNIE
    assert settings.required_confirmations == 1
    assert settings.rpc_url == "http://localhost:8545"
    assert settings.build_dir == "build/contracts"
    assert settings.gas_limit is None
    assert settings.output_path is None


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("DEPLOY_BACKEND", "web3")
    monkeypatch.setenv("DEPLOY_REQUIRED_CONFIRMATIONS", "3")
    monkeypatch.setenv("DEPLOY_GAS_LIMIT", "6000000")
    monkeypatch.setenv("DEPLOY_LOG_LEVEL", "debug")

    settings = make_settings()

    assert settings.backend == Backend.WEB3
    assert settings.required_confirmations == 3
    assert settings.gas_limit == 6_000_000
    assert settings.log_level == "DEBUG"


def test_empty_strings_mean_unset(monkeypatch):
    monkeypatch.setenv("DEPLOY_GAS_PRICE", "")
    monkeypatch.setenv("DEPLOY_PRIVATE_KEY", "")
    monkeypatch.setenv("DEPLOY_NETWORK", " ")

    settings = make_settings()

    assert settings.gas_price is None
    assert settings.private_key is None
    assert settings.network is None


def test_invalid_type_rejected():
    with pytest.raises(ValidationError):
        make_settings(required_confirmations="many")


def test_get_settings_reads_environment_on_each_call(monkeypatch):
    monkeypatch.setenv("DEPLOY_REQUIRED_CONFIRMATIONS", "0")

    settings = get_settings()

    assert settings.required_confirmations == 0
    with pytest.raises(ConfigurationError, match="at least 1"):
        validate_settings(settings)

    monkeypatch.setenv("DEPLOY_REQUIRED_CONFIRMATIONS", "4")
    assert get_settings().required_confirmations == 4


class TestValidateSettings:

    def test_valid(self):
        settings = make_settings(backend=Backend.WEB3)
        assert validate_settings(settings) is settings

    def test_legacy_and_eip1559_fees_conflict(self):
        with pytest.raises(ConfigurationError):
            validate_settings(make_settings(gas_price=10, max_fee=20))

    def test_confirmations_checked_after_override(self):
        settings = make_settings().model_copy(update={'required_confirmations': 0})
        with pytest.raises(ConfigurationError):
            validate_settings(settings)

    def test_negative_account_index(self):
        with pytest.raises(ConfigurationError):
            validate_settings(make_settings(account_index=-1))


class TestTxOptions:

    def test_only_set_values_passed(self):
        options = TxOptions.from_settings(make_settings(gas_limit=5_000_000, priority_fee=2))

        assert options.brownie_params() == {'gas_limit': 5_000_000, 'priority_fee': 2}
        assert options.web3_params() == {'gas': 5_000_000, 'maxPriorityFeePerGas': 2}

    def test_empty_by_default(self):
        options = TxOptions()

        assert options.brownie_params() == {}
        assert options.web3_params() == {}
