"""Tests for CLI module."""

import os

import pytest
from unittest.mock import patch, AsyncMock, MagicMock

from ferry.application.dtos.deployment_dtos import (
    ApplicationResponse,
    CreateApplicationResponse,
    DeploymentResponse,
    ResourceField,
)
from ferry.domain.entities.application import Application
from ferry.domain.exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    MissingParameterError,
    UsageError,
)
from ferry.domain.value_objects.deployment_handle import DeploymentHandle
from ferry.domain.value_objects.wait_result import WaitResult
from ferry.infrastructure.config import FerryConfig
from ferry.presentation.cli.arguments import parse_duration
from ferry.presentation.cli.cli import async_main

WEB = Application(id="/web", cpus=0.5, mem=128.0, instances=2)


def _make_container(**overrides):
    """Create a mock container with sensible defaults."""
    container = MagicMock()
    container.config = FerryConfig()
    container.deploy_application.execute = AsyncMock(
        return_value=CreateApplicationResponse(application=WEB)
    )
    container.update_resource.execute = AsyncMock(
        return_value=ApplicationResponse(application=WEB)
    )
    container.rollback.execute = AsyncMock(return_value=ApplicationResponse(application=WEB))
    container.scale.execute = AsyncMock(
        return_value=DeploymentResponse(handle=DeploymentHandle("d-1"))
    )
    container.queries.list = AsyncMock(return_value=[WEB])
    for key, value in overrides.items():
        setattr(container, key, value)
    return container


async def _run(argv, container):
    with patch("sys.argv", ["ferry", *argv]), \
         patch("ferry.composition_root.create_container", return_value=container):
        await async_main()


class TestCLIHelp:
    @pytest.mark.asyncio
    async def test_no_command_prints_help(self, capsys):
        with patch("sys.argv", ["ferry"]):
            await async_main()
        assert "Marathon application deployment engine" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_help_flag(self):
        with patch("sys.argv", ["ferry", "--help"]), \
             pytest.raises(SystemExit, match="0"):
            await async_main()

    @pytest.mark.asyncio
    async def test_create_help(self):
        with patch("sys.argv", ["ferry", "app", "create", "--help"]), \
             pytest.raises(SystemExit, match="0"):
            await async_main()

    @pytest.mark.asyncio
    async def test_update_cpu_help(self):
        with patch("sys.argv", ["ferry", "app", "update", "cpu", "--help"]), \
             pytest.raises(SystemExit, match="0"):
            await async_main()

    @pytest.mark.asyncio
    async def test_bare_app_prints_help_and_exits_2(self, capsys):
        with patch("sys.argv", ["ferry", "app"]), pytest.raises(SystemExit) as exc_info:
            await async_main()

        assert exc_info.value.code == 2
        out = capsys.readouterr().out
        assert "usage: ferry app" in out
        assert "rollback" in out

    @pytest.mark.asyncio
    async def test_bare_update_group_prints_help_and_exits_2(self, capsys):
        with patch("sys.argv", ["ferry", "app", "update"]), \
             pytest.raises(SystemExit) as exc_info:
            await async_main()

        assert exc_info.value.code == 2
        out = capsys.readouterr().out
        assert "usage: ferry app update" in out
        assert "'ferry app update' needs a command" in out


class TestConfigurationErrors:
    @pytest.mark.asyncio
    async def test_zero_poll_interval_exits_1(self, tmp_path, capsys):
        config_file = tmp_path / "ferry.json"
        config_file.write_text('{"wait": {"poll_interval_seconds": 0}}')
        container = _make_container()

        with pytest.raises(SystemExit) as exc_info:
            await _run(["--config", str(config_file), "app", "list"], container)

        assert exc_info.value.code == 1
        assert "[-] Invalid configuration" in capsys.readouterr().out
        container.queries.list.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_numeric_env_timeout_exits_1(self, capsys):
        with patch.dict(os.environ, {"FERRY_WAIT_DEFAULT_TIMEOUT_SECONDS": "ninety"}), \
             pytest.raises(SystemExit) as exc_info:
            await _run(["app", "list"], _make_container())

        assert exc_info.value.code == 1
        assert "wait.default_timeout_seconds" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_plaintext_remote_telemetry_exits_1(self, capsys):
        env = {"FERRY_TELEMETRY_ENDPOINT": "http://collector:4317"}
        with patch.dict(os.environ, env), \
             patch("sys.argv", ["ferry", "app", "get", "/web"]), \
             pytest.raises(SystemExit) as exc_info:
            await async_main()

        assert exc_info.value.code == 1
        assert "telemetry.endpoint" in capsys.readouterr().out


class TestCreateCommand:
    @pytest.mark.asyncio
    async def test_flags_become_request(self, capsys):
        container = _make_container()

        await _run(
            ["app", "create", "web.json", "-f", "--stop-deploys", "-i", "-c", "dev.env",
             "-p", "CPU=2", "-p", "MEM=64", "-w", "-t", "2m"],
            container,
        )

        request = container.deploy_application.execute.call_args.args[0]
        assert request.descriptor_path == "web.json"
        assert request.params == ("CPU=2", "MEM=64")
        assert request.params_file == "dev.env"
        assert request.template_context_path == "template-context.json"
        assert request.options.force is True
        assert request.options.stop_existing_deploy is True
        assert request.options.error_on_missing_params is False
        assert request.options.wait is True
        assert request.options.timeout == 120.0
        assert "/web" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_dry_run_prints_descriptor(self, capsys):
        container = _make_container()
        container.deploy_application.execute = AsyncMock(
            return_value=CreateApplicationResponse(
                descriptor_text='{"id": "/web"}', dry_run=True
            )
        )

        await _run(["app", "create", "web.json", "--dry-run"], container)

        assert '{"id": "/web"}' in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_timeout_reported_without_failing(self, capsys):
        handle = DeploymentHandle("d-1")
        container = _make_container()
        container.deploy_application.execute = AsyncMock(
            return_value=CreateApplicationResponse(
                application=WEB, wait=WaitResult.timed_out([handle], 80.0, [handle])
            )
        )

        await _run(["app", "create", "web.json", "-w"], container)

        assert "did not complete within 80s" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_already_exists_exits_1_with_hint(self, capsys):
        container = _make_container()
        container.deploy_application.execute = AsyncMock(
            side_effect=AlreadyExistsError("/web")
        )

        with pytest.raises(SystemExit) as exc_info:
            await _run(["app", "create", "web.json"], container)

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert "[-] Application '/web' already exists" in out
        assert "--force" in out

    @pytest.mark.asyncio
    async def test_missing_parameter_exits_1(self, capsys):
        container = _make_container()
        container.deploy_application.execute = AsyncMock(
            side_effect=MissingParameterError("CPU")
        )

        with pytest.raises(SystemExit) as exc_info:
            await _run(["app", "create", "web.json"], container)

        assert exc_info.value.code == 1
        assert "${CPU}" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_param_without_equals_is_usage_error(self):
        container = _make_container()

        with pytest.raises(SystemExit) as exc_info:
            await _run(["app", "create", "web.json", "-p", "NOVALUE"], container)

        assert exc_info.value.code == 2
        container.deploy_application.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_descriptor_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            await _run(["app", "create"], _make_container())

        assert exc_info.value.code == 2

    @pytest.mark.asyncio
    async def test_bad_timeout_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            await _run(["app", "create", "web.json", "-t", "soon"], _make_container())

        assert exc_info.value.code == 2


class TestOtherCommands:
    @pytest.mark.asyncio
    async def test_update_cpu(self):
        container = _make_container()

        await _run(["app", "update", "cpu", "/web", "0.75", "--wait"], container)

        request = container.update_resource.execute.call_args.args[0]
        assert request.field is ResourceField.CPU
        assert request.value == "0.75"
        assert request.wait is True

    @pytest.mark.asyncio
    async def test_update_invalid_value_exits_1(self, capsys):
        container = _make_container()
        container.update_resource.execute = AsyncMock(
            side_effect=InvalidArgumentError("Invalid CPU shares value 'notanumber'")
        )

        with pytest.raises(SystemExit) as exc_info:
            await _run(["app", "update", "cpu", "/web", "notanumber"], container)

        assert exc_info.value.code == 1
        assert "notanumber" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_rollback_explicit_version(self):
        container = _make_container()

        await _run(["app", "rollback", "/web", "v3"], container)

        request = container.rollback.execute.call_args.args[0]
        assert request.app_id == "/web"
        assert request.version == "v3"

    @pytest.mark.asyncio
    async def test_scale_prints_deployment(self, capsys):
        container = _make_container()

        await _run(["app", "scale", "/web", "3"], container)

        assert "Deployment ID: d-1" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_list(self, capsys):
        container = _make_container()

        await _run(["app", "list", "label=web"], container)

        container.queries.list.assert_awaited_once_with("label=web")
        assert "/web" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_host_overrides_config(self):
        container = _make_container()

        with patch("sys.argv", ["ferry", "--host", "http://m:8080", "app", "list"]), \
             patch("ferry.composition_root.create_container", return_value=container) as factory:
            await async_main()

        config = factory.call_args.args[0]
        assert config.marathon.url == "http://m:8080"

    @pytest.mark.asyncio
    async def test_unexpected_error_exits_1(self, capsys):
        container = _make_container()
        container.queries.list = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(SystemExit) as exc_info:
            await _run(["app", "list"], container)

        assert exc_info.value.code == 1
        assert "List failed: boom" in capsys.readouterr().out


class TestParseDuration:
    @pytest.mark.parametrize(
        "text,seconds",
        [("90", 90.0), ("90s", 90.0), ("2m", 120.0), ("1h30m", 5400.0), ("500ms", 0.5)],
    )
    def test_valid(self, text, seconds):
        assert parse_duration(text) == seconds

    def test_zero_means_default(self):
        assert parse_duration("0") is None

    @pytest.mark.parametrize("text", ["", "soon", "5x", "m5", "-3"])
    def test_invalid(self, text):
        with pytest.raises(UsageError):
            parse_duration(text)
