"""CLI unit tests for chutes-plugin."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List
from unittest.mock import Mock, patch

import pytest
import requests
from click.testing import CliRunner

from chutes_model_registry.cli import app
from chutes_model_registry.cli.utils.helpers import ExitCode, create_fetcher
from chutes_model_registry.config import PluginConfig
from chutes_model_registry.fetcher import ModelFetcher


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command in an empty home and working directory."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("CHUTES_CONFIG_PATH", str(tmp_path / "missing.yml"))
    monkeypatch.delenv("CHUTES_API_TOKEN", raising=False)
    monkeypatch.delenv("CHUTES_PLUGIN_BUNDLE", raising=False)
    monkeypatch.chdir(work)
    return tmp_path


@pytest.fixture
def session(response_factory: Callable[..., requests.Response], api_models: List[Dict[str, Any]]) -> Mock:
    """Session returning the sample models."""
    session = Mock(spec=requests.Session)
    session.get.return_value = response_factory(200, {"data": api_models})
    return session


@pytest.fixture
def fetcher_factory(session: Mock) -> Callable[[Dict[str, Any]], ModelFetcher]:
    """Replacement for create_fetcher that injects the mocked session."""

    def factory(ctx_obj: Dict[str, Any]) -> ModelFetcher:
        fetcher = create_fetcher(ctx_obj)
        fetcher._session = session
        return fetcher

    return factory


@pytest.fixture
def patched_fetcher(fetcher_factory: Callable[[Dict[str, Any]], ModelFetcher]) -> Iterator[None]:
    """Patch create_fetcher in every command module that uses it."""
    with patch("chutes_model_registry.cli.commands.models.create_fetcher", side_effect=fetcher_factory), patch(
        "chutes_model_registry.cli.commands.doctor.create_fetcher", side_effect=fetcher_factory
    ):
        yield


class TestRootCommand:
    """Tests for the root group."""

    def test_help(self, cli_runner: CliRunner) -> None:
        """--help lists the subcommands."""
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("install", "status", "list", "refresh", "doctor"):
            assert command in result.output

    def test_no_subcommand_prints_help(self, cli_runner: CliRunner) -> None:
        """Running without a subcommand prints help."""
        result = cli_runner.invoke(app, [])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        """--version prints the package version."""
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("chutes-plugin version: ")

    def test_invalid_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """A config file that fails validation exits with CONFIG_ERROR."""
        config_file = tmp_path / "bad.yml"
        config_file.write_text("refreshInterval: 1\n")

        result = cli_runner.invoke(app, ["--config", str(config_file), "status"])

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "refresh_interval" in result.output


@pytest.mark.usefixtures("patched_fetcher")
class TestListCommand:
    """Tests for the list command."""

    def test_list_json(self, cli_runner: CliRunner, session: Mock) -> None:
        """JSON output carries display entries and a count."""
        result = cli_runner.invoke(app, ["--format", "json", "list"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["count"] == 3
        assert data["models"][0]["id"] == "chutes/Qwen/Qwen3-32B"
        assert data["models"][0]["originalId"] == "Qwen/Qwen3-32B"
        assert data["models"][2]["contextLength"] == 131072
        assert session.get.call_args.args[0] == "https://llm.chutes.ai/v1/models"

    def test_list_filters(self, cli_runner: CliRunner) -> None:
        """Filters narrow the result."""
        result = cli_runner.invoke(app, ["--format", "json", "list", "--owner", "vllm", "--feature", "tools"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [m["originalId"] for m in data["models"]] == ["unsloth/gemma-3-27b-it"]

    def test_list_no_pricing(self, cli_runner: CliRunner) -> None:
        """--no-pricing drops the pricing block."""
        result = cli_runner.invoke(app, ["--format", "json", "list", "--no-pricing"])
        data = json.loads(result.output)
        assert all("pricing" not in m for m in data["models"])

    def test_list_table(self, cli_runner: CliRunner) -> None:
        """Table output has a titled table."""
        result = cli_runner.invoke(app, ["--format", "table", "--no-color", "list"])

        assert result.exit_code == 0
        assert "Chutes Models (3)" in result.output

    def test_list_api_url(self, cli_runner: CliRunner, session: Mock) -> None:
        """--api-url changes the endpoint."""
        result = cli_runner.invoke(app, ["--format", "json", "--api-url", "http://localhost:9000/v1/", "list"])

        assert result.exit_code == 0
        assert session.get.call_args.args[0] == "http://localhost:9000/v1/models"

    def test_list_sends_env_token(
        self, cli_runner: CliRunner, session: Mock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The token from CHUTES_API_TOKEN is sent."""
        monkeypatch.setenv("CHUTES_API_TOKEN", "cpk_env")
        cli_runner.invoke(app, ["--format", "json", "list"])
        assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer cpk_env"

    @pytest.mark.parametrize(
        "status,exit_code",
        [(401, ExitCode.AUTH_ERROR), (404, ExitCode.GENERIC_ERROR)],
    )
    def test_list_fetch_errors(
        self,
        cli_runner: CliRunner,
        session: Mock,
        response_factory: Callable[..., requests.Response],
        status: int,
        exit_code: int,
    ) -> None:
        """Fetch failures map to exit codes."""
        session.get.return_value = response_factory(status)

        result = cli_runner.invoke(app, ["--format", "json", "list"])

        assert result.exit_code == exit_code
        assert "Error:" in result.output

    def test_list_invalid_response(
        self, cli_runner: CliRunner, session: Mock, response_factory: Callable[..., requests.Response]
    ) -> None:
        """A malformed body is a data source error."""
        session.get.return_value = response_factory(200, {"object": "list"})
        result = cli_runner.invoke(app, ["--format", "json", "list"])
        assert result.exit_code == ExitCode.DATA_SOURCE_ERROR


@pytest.mark.usefixtures("patched_fetcher")
class TestRefreshCommand:
    """Tests for the refresh command."""

    def test_refresh_json(self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """JSON output reports the count and TTL."""
        config_file = tmp_path / "config.yml"
        config_file.write_text("refreshInterval: 600\n")
        monkeypatch.setenv("CHUTES_CONFIG_PATH", str(config_file))

        result = cli_runner.invoke(app, ["--format", "json", "refresh"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"success": True, "count": 3, "cache_ttl_seconds": 600}

    def test_refresh_table(self, cli_runner: CliRunner) -> None:
        """Table output confirms the refresh."""
        result = cli_runner.invoke(app, ["--format", "table", "--no-color", "refresh"])
        assert result.exit_code == 0
        assert "Successfully refreshed 3 models" in result.output


class TestInstallCommand:
    """Tests for the install command."""

    @pytest.fixture
    def bundle(self, isolated_home: Path) -> Path:
        """A built plugin bundle in dist/."""
        path = isolated_home / "work" / "dist" / "bundle.js"
        path.parent.mkdir()
        path.write_text("export default {}\n")
        return path

    def test_missing_bundle(self, cli_runner: CliRunner) -> None:
        """Without a bundle the command exits with DATA_SOURCE_ERROR."""
        result = cli_runner.invoke(app, ["install", "--target", "project"])
        assert result.exit_code == ExitCode.DATA_SOURCE_ERROR
        assert "not found" in result.output

    def test_install_project(self, cli_runner: CliRunner, bundle: Path, isolated_home: Path) -> None:
        """The bundle is copied into .opencode/plugin."""
        result = cli_runner.invoke(app, ["--format", "json", "install", "--target", "project"])

        assert result.exit_code == 0
        installed = isolated_home / "work" / ".opencode" / "plugin" / "chutes-plugin.js"
        assert installed.read_text() == "export default {}\n"
        assert json.loads(result.output) == {"success": True, "target": "project", "location": str(installed)}

    def test_install_global(self, cli_runner: CliRunner, bundle: Path, isolated_home: Path) -> None:
        """--target global installs under the home directory."""
        result = cli_runner.invoke(app, ["--format", "json", "install", "--target", "GLOBAL"])

        assert result.exit_code == 0
        assert (isolated_home / "home" / ".config" / "opencode" / "plugin" / "chutes-plugin.js").is_file()

    def test_install_bundle_option(self, cli_runner: CliRunner, isolated_home: Path) -> None:
        """--bundle points at another file."""
        other = isolated_home / "other.js"
        other.write_text("// other\n")

        result = cli_runner.invoke(app, ["--format", "json", "install", "--bundle", str(other), "--target", "project"])

        assert result.exit_code == 0
        assert (isolated_home / "work" / ".opencode" / "plugin" / "chutes-plugin.js").read_text() == "// other\n"

    def test_prompt_choose_global(self, cli_runner: CliRunner, bundle: Path, isolated_home: Path) -> None:
        """With opencode.json present the user is asked where to install."""
        (isolated_home / "work" / "opencode.json").write_text("{}")

        result = cli_runner.invoke(app, ["--format", "table", "--no-color", "install"], input="2\n")

        assert result.exit_code == 0
        assert "Select option" in result.output
        assert "Successfully installed" in result.output
        assert (isolated_home / "home" / ".config" / "opencode" / "plugin" / "chutes-plugin.js").is_file()

    def test_yes_skips_prompt(self, cli_runner: CliRunner, bundle: Path, isolated_home: Path) -> None:
        """--yes installs into the project without asking."""
        (isolated_home / "work" / "opencode.json").write_text("{}")

        result = cli_runner.invoke(app, ["--format", "table", "--no-color", "install", "--yes"])

        assert result.exit_code == 0
        assert "Select option" not in result.output
        assert (isolated_home / "work" / ".opencode" / "plugin" / "chutes-plugin.js").is_file()

    def test_prompt_cancel(self, cli_runner: CliRunner, bundle: Path, isolated_home: Path) -> None:
        """Answering c cancels."""
        (isolated_home / "work" / "opencode.json").write_text("{}")

        result = cli_runner.invoke(app, ["--format", "table", "--no-color", "install"], input="c\n")

        assert result.exit_code == 0
        assert "Installation cancelled." in result.output
        assert not (isolated_home / "work" / ".opencode").exists()


class TestStatusCommand:
    """Tests for the status command."""

    def test_nothing_configured(self, cli_runner: CliRunner) -> None:
        """Fresh environment: not installed, no token."""
        result = cli_runner.invoke(app, ["--format", "json", "status"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "plugin_installed": False,
            "plugin_locations": [],
            "api_token_connected": False,
            "api_token_source": None,
        }

    def test_installed_with_auth_file(self, cli_runner: CliRunner, isolated_home: Path) -> None:
        """Installed plugin and connected token are reported."""
        plugin_file = isolated_home / "work" / ".opencode" / "plugin" / "chutes-plugin.js"
        plugin_file.parent.mkdir(parents=True)
        plugin_file.write_text("")
        auth_file = isolated_home / "home" / ".local" / "share" / "opencode" / "auth.json"
        auth_file.parent.mkdir(parents=True)
        auth_file.write_text(json.dumps({"chutes": {"type": "api", "key": "cpk"}}))

        result = cli_runner.invoke(app, ["--format", "json", "status"])

        data = json.loads(result.output)
        assert data["plugin_installed"] is True
        assert data["plugin_locations"] == [str(plugin_file)]
        assert data["api_token_source"] == "OpenCode auth.json"

    def test_env_token_source(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        """The environment variable is named as the source."""
        monkeypatch.setenv("CHUTES_API_TOKEN", "cpk")
        result = cli_runner.invoke(app, ["--format", "table", "--no-color", "status"])
        assert "CHUTES_API_TOKEN environment variable" in result.output


@pytest.mark.usefixtures("patched_fetcher")
class TestDoctorCommand:
    """Tests for the doctor command."""

    def test_failing_checks(self, cli_runner: CliRunner) -> None:
        """Missing install and token fail the run."""
        result = cli_runner.invoke(app, ["--format", "json", "doctor"])

        assert result.exit_code == ExitCode.GENERIC_ERROR
        data = json.loads(result.output)
        assert data["total"] == 3
        assert data["passed"] == 1
        assert data["ok"] is False
        network = data["checks"][2]
        assert network["section"] == "Network"
        assert network["message"] == "Found 3 models available"

    def test_all_checks_pass(self, cli_runner: CliRunner, isolated_home: Path) -> None:
        """Installed plugin, token and reachable API pass."""
        plugin_file = isolated_home / "home" / ".config" / "opencode" / "plugin" / "chutes-plugin.js"
        plugin_file.parent.mkdir(parents=True)
        plugin_file.write_text("")
        config_file = isolated_home / "config.yml"
        config_file.write_text("apiToken: cpk_config\n")

        result = cli_runner.invoke(app, ["--config", str(config_file), "--format", "table", "--no-color", "doctor"])

        assert result.exit_code == 0
        assert "Results: 3/3 checks passed" in result.output
        assert "Source: config file" in result.output

    def test_network_failure(
        self, cli_runner: CliRunner, session: Mock, response_factory: Callable[..., requests.Response]
    ) -> None:
        """An unreachable API is reported as a failed check."""
        session.get.return_value = response_factory(404)

        result = cli_runner.invoke(app, ["--format", "json", "doctor"])

        data = json.loads(result.output)
        assert data["checks"][2]["passed"] is False
        assert data["checks"][2]["message"].startswith("Connection failed: HTTP error: 404")


def test_create_fetcher_uses_config() -> None:
    """create_fetcher applies TTL, prefix, URL and token."""
    fetcher = create_fetcher(
        {"config": PluginConfig(api_token="cpk", refresh_interval=120, prefix="ch"), "api_url": "http://x/v1"}
    )
    with fetcher:
        assert fetcher.models_url == "http://x/v1/models"
        assert fetcher.get_cache().ttl_ms == 120_000
        assert fetcher.get_registry().prefix == "ch"
        assert fetcher.get_api_token() == "cpk"
