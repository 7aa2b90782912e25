#!/usr/bin/env python3
"""
Tests for the command line entry point
"""

import json

import pytest

from deployment import cli
from deployment.config import Backend, Settings

from conftest import FakeChain


@pytest.fixture
def settings():
    return Settings(_env_file=None, backend=Backend.BROWNIE, network=None, private_key=None,
                    sequence_path=None, output_path=None)


class TestDeploy:

    def test_success_exit_code_and_stdout(self, chain, settings, capsys):
        status = cli.deploy(settings, context=chain)

        captured = capsys.readouterr()
        assert status == 0
        assert captured.out == "Auction: 0x1\nBasket: 0x2\nFactory: 0x3\n"
        assert "Deployment completed" in captured.err

    def test_failure_exit_code(self, chain, settings, capsys):
        chain.fail_submit["Auction"] = ConnectionError("network unreachable")

        status = cli.deploy(settings, context=chain)

        captured = capsys.readouterr()
        assert status == 1
        assert captured.out == ""
        assert "Deployment failed" in captured.err
        assert chain.submitted() == ["Auction"]

    def test_basket_failure(self, chain, settings, capsys):
        chain.fail_confirm["Basket"] = RuntimeError("dropped")

        status = cli.deploy(settings, context=chain)

        assert status == 1
        assert "Factory" not in chain.submitted()
        assert capsys.readouterr().out == ""

    def test_context_errors_reported(self, settings, monkeypatch, capsys):
        def broken_context(_settings):
            raise OSError("connection refused")

        monkeypatch.setattr(cli, "build_context", broken_context)

        assert cli.deploy(settings) == 1
        assert "connection refused" in capsys.readouterr().err

    def test_writes_record(self, chain, settings, tmp_path, capsys):
        output = tmp_path / "deployment_info.json"
        settings = settings.model_copy(update={'output_path': str(output)})

        assert cli.deploy(settings, context=chain) == 0

        record = json.loads(output.read_text())
        assert record['factory_address'] == "0x3"
        assert record['block_number'] == chain.block_number()

    def test_custom_sequence(self, settings, tmp_path, capsys):
        path = tmp_path / "sequence.yaml"
        path.write_text("contracts:\n  - name: Auction\n  - name: Registry\n    args: [Auction]\n")
        chain = FakeChain(artifacts=("Auction", "Registry"))
        settings = settings.model_copy(update={'sequence_path': str(path)})

        assert cli.deploy(settings, context=chain) == 0
        assert capsys.readouterr().out == "Auction: 0x1\nRegistry: 0x2\n"
        assert chain.constructor_args["Registry"] == ("0x1",)

    def test_summary(self, chain, settings, capsys):
        assert cli.deploy(settings, context=chain, summary=True) == 0
        assert "Deployment Summary" in capsys.readouterr().err


class TestMain:

    def test_overrides(self, settings):
        args = cli.build_parser().parse_args([
            "--backend", "web3", "--rpc-url", "http://node:8545", "--confirmations", "2",
            "--output", "out.json", "--log-level", "debug",
        ])

        resolved = cli.resolve_settings(args, base=settings)

        assert resolved.backend == Backend.WEB3
        assert resolved.rpc_url == "http://node:8545"
        assert resolved.required_confirmations == 2
        assert resolved.output_path == "out.json"
        assert resolved.log_level == "DEBUG"

    def test_unset_flags_keep_settings(self, settings):
        args = cli.build_parser().parse_args([])

        resolved = cli.resolve_settings(args, base=settings)

        assert resolved.backend == settings.backend
        assert resolved.required_confirmations == 1

    def test_invalid_confirmations(self, monkeypatch, settings, capsys):
        monkeypatch.setattr(cli, "get_settings", lambda: settings)

        assert cli.main(["--confirmations", "0"]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_invalid_environment_reported(self, monkeypatch, capsys):
        monkeypatch.setenv("DEPLOY_REQUIRED_CONFIRMATIONS", "0")

        assert cli.main([]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_malformed_environment_reported(self, monkeypatch, capsys):
        monkeypatch.setenv("DEPLOY_ACCOUNT_INDEX", "first")

        assert cli.main([]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_main_runs_deployment(self, monkeypatch, settings, chain, capsys):
        monkeypatch.setattr(cli, "get_settings", lambda: settings)
        monkeypatch.setattr(cli, "build_context", lambda _settings: chain)

        assert cli.main([]) == 0
        assert capsys.readouterr().out.splitlines() == ["Auction: 0x1", "Basket: 0x2", "Factory: 0x3"]
