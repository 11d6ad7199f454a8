"""Tests for the `sprout stringify` command."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from sprout.__main__ import app

runner = CliRunner()

SCRIPT = """
value = {"a": [1, 2]}
fn = lambda: 3


def explode():
    raise RuntimeError("boom")


class Holder:
    inner = {"x": 1}
"""


@pytest.fixture
def script(tmp_path: Path) -> Path:
    path = tmp_path / "fixture_values.py"
    path.write_text(SCRIPT, encoding="utf-8")
    return path


def test_stringify_default_attribute(script: Path) -> None:
    result = runner.invoke(app, ["stringify", str(script)])

    assert result.exit_code == 0
    assert result.stdout.strip() == '{"a":[1,2]}'


def test_stringify_dotted_attribute(script: Path) -> None:
    result = runner.invoke(app, ["stringify", f"{script}:Holder.inner"])

    assert result.exit_code == 0
    assert result.stdout.strip() == '{"x":1}'


def test_stringify_invoke_fns(script: Path) -> None:
    plain = runner.invoke(app, ["stringify", f"{script}:fn"])
    invoked = runner.invoke(app, ["stringify", f"{script}:fn", "--invoke-fns"])

    assert plain.stdout.strip() == '"[[ function params=0 ]]"'
    assert invoked.stdout.strip() == '{"kind":"Function","result":3}'


def test_stringify_render(script: Path) -> None:
    result = runner.invoke(app, ["stringify", str(script), "--render"])

    assert result.exit_code == 0
    assert result.stdout.strip() == '<div>{"value":{"a":[1,2]},"shouldInvokeFns":false}</div>'


def test_stringify_module_target() -> None:
    result = runner.invoke(app, ["stringify", "sprout.serialization.constants:FUNCTION_KIND"])

    assert result.exit_code == 0
    assert result.stdout.strip() == '"Function"'


def test_stringify_missing_attribute_exits(script: Path) -> None:
    result = runner.invoke(app, ["stringify", f"{script}:missing"])

    assert result.exit_code == 1


def test_stringify_missing_script_exits(tmp_path: Path) -> None:
    result = runner.invoke(app, ["stringify", str(tmp_path / "nope.py")])

    assert result.exit_code == 1


def test_stringify_invocation_failure_exits(script: Path) -> None:
    result = runner.invoke(app, ["stringify", f"{script}:explode", "--invoke-fns"])

    assert result.exit_code == 1


def test_stringify_rejects_invalid_log_level(script: Path) -> None:
    result = runner.invoke(app, ["stringify", str(script), "--log-level", "loud"])

    assert result.exit_code == 1


def test_stringify_env_file_enables_invocation(
    script: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    # 先登记再删除，确保测试结束后还原为未设置状态
    monkeypatch.setenv("SPROUT_INVOKE_FNS", "false")
    monkeypatch.delenv("SPROUT_INVOKE_FNS")
    env_file = tmp_path / ".env"
    env_file.write_text("SPROUT_INVOKE_FNS=true\n", encoding="utf-8")

    result = runner.invoke(app, ["stringify", f"{script}:fn", "--env-file", str(env_file)])

    assert result.exit_code == 0
    assert result.stdout.strip() == '{"kind":"Function","result":3}'


def test_stringify_configures_logging_from_settings(
    script: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import sprout.settings

    calls: list[tuple] = []
    monkeypatch.setattr(sprout.settings, "configure_logging", lambda settings, **kw: calls.append((settings, kw)))
    for name in ("SPROUT_LOG_ENV", "SPROUT_LOG_ROTATION"):
        # 注意：先登记再删除，测试结束时撤销 `.env` 写入的变量
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    env_file = tmp_path / ".env"
    env_file.write_text("SPROUT_LOG_ENV=container_json\nSPROUT_LOG_ROTATION=5 MB\n", encoding="utf-8")

    default = runner.invoke(app, ["stringify", str(script), "--env-file", str(env_file)])
    explicit = runner.invoke(app, ["stringify", str(script), "--log-level", "info"])

    assert default.exit_code == 0
    assert explicit.exit_code == 0
    (settings, overrides), (_, explicit_overrides) = calls
    assert settings.log_env == "container_json"
    assert settings.log_rotation == "5 MB"
    assert overrides == {"log_level": None}
    assert explicit_overrides == {"log_level": "info"}
