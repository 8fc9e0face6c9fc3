"""
Command line interface.
"""

import pytest
from click.testing import CliRunner

from nestlet import __version__, injectable, module
from nestlet.cli.__main__ import cli


# ============================================================================
# Targets
# ============================================================================

@module()
class EmptyModule:
    pass


@injectable("DATABASE")
class NeedsDatabase:
    def __init__(self, db):
        self.db = db


@module(providers=[NeedsDatabase])
class BrokenModule:
    pass


@pytest.fixture
def runner():
    return CliRunner()


class TestCLI:

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_routes(self, runner):
        result = runner.invoke(cli, ["routes", "cats_app:AppModule"])
        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert len(lines) == 6
        assert "GET" in lines[0]
        assert "/cats  CatsController.find_all()" in lines[0]
        assert "/cats/:id  CatsController.remove()" in lines[-1]

    def test_routes_empty(self, runner):
        result = runner.invoke(cli, ["routes", "test_cli:EmptyModule"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "No routes."

    def test_modules(self, runner):
        result = runner.invoke(cli, ["modules", "cats_app:AppModule"])
        assert result.exit_code == 0, result.output
        assert "AppModule  distance=0" in result.output
        assert "CatsModule  distance=1" in result.output
        assert "imports:     CatsModule" in result.output
        assert "providers:   CatsService" in result.output
        assert "controllers: CatsController" in result.output
        assert "exports:     CatsService" in result.output

    def test_bad_target_format(self, runner):
        result = runner.invoke(cli, ["routes", "cats_app"])
        assert result.exit_code == 2
        assert "module:RootModule" in result.output

    def test_unknown_module(self, runner):
        result = runner.invoke(cli, ["routes", "no_such_module:AppModule"])
        assert result.exit_code == 2
        assert "cannot import" in result.output

    def test_unknown_attribute(self, runner):
        result = runner.invoke(cli, ["routes", "cats_app:Nope"])
        assert result.exit_code == 2
        assert "has no attribute" in result.output

    def test_bootstrap_error(self, runner):
        result = runner.invoke(cli, ["routes", "test_cli:BrokenModule"])
        assert result.exit_code == 1
        assert "Cannot resolve dependency of NeedsDatabase" in result.output

    def test_serve_rejects_bad_config(self, runner, monkeypatch):
        monkeypatch.setenv("NESTLET_PORT", "eighty")
        result = runner.invoke(cli, ["serve", "cats_app:AppModule"])
        assert result.exit_code == 1
        assert "port" in result.output

