import os
import time

import pytest

from silentcast.errors import ErrorType, is_type
from silentcast.executors import (
    ActionError,
    ActionManager,
    AppExecutor,
    ScriptExecutor,
    expand_env,
)
from silentcast.settings import ActionConfig


def _read_when_written(path, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if path.exists():
            text = path.read_text()
            if text.endswith("\n"):
                return text
        time.sleep(0.02)
    raise AssertionError(f"{path} was not written")


def test_expand_env_plain_and_braced(monkeypatch):
    monkeypatch.setenv("SC_TEST_A", "alpha")
    assert expand_env("$SC_TEST_A-${SC_TEST_A}/x") == "alpha-alpha/x"


def test_expand_env_unset_becomes_empty(monkeypatch):
    monkeypatch.delenv("SC_TEST_MISSING", raising=False)
    assert expand_env("a$SC_TEST_MISSING b") == "a b"


def test_expand_env_without_references():
    assert expand_env("git status") == "git status"


# ActionManager


def test_manager_runs_script_spell(tmp_path):
    grimoire = {
        "echo_test": ActionConfig(
            type="script",
            command="echo 'test' > out.txt",
            working_dir=str(tmp_path),
            description="Test echo command",
        )
    }
    ActionManager(grimoire).execute("echo_test")
    assert (tmp_path / "out.txt").read_text() == "test\n"


@pytest.mark.parametrize(
    "spell, message",
    [
        ("non_existent", "not found in grimoire"),
        ("unknown_type", "unknown action type"),
        ("invalid_app", "application not found"),
    ],
)
def test_manager_errors(spell, message):
    grimoire = {
        "invalid_app": ActionConfig(
            type="app", command="/non/existent/app", description="Non-existent app"
        ),
        "unknown_type": ActionConfig(type="unknown", command="something"),
    }
    with pytest.raises(ActionError) as info:
        ActionManager(grimoire).execute(spell)
    assert message in str(info.value)
    assert is_type(info.value, ErrorType.EXECUTION)


def test_manager_error_names_the_spell():
    grimoire = {"broken": ActionConfig(type="app", command="/non/existent/app")}
    with pytest.raises(ActionError) as info:
        ActionManager(grimoire).execute("broken")
    assert str(info.value) == (
        "failed to execute spell 'broken': application not found: /non/existent/app"
    )


# AppExecutor


def test_app_launches_executable_from_path(tmp_path):
    config = ActionConfig(
        type="app",
        command="sh",
        args=["-c", "echo launched > out.txt"],
        working_dir=str(tmp_path),
    )
    AppExecutor(config).execute()
    assert _read_when_written(tmp_path / "out.txt") == "launched\n"


def test_app_passes_expanded_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("SC_TEST_SOURCE", "expanded-value")
    config = ActionConfig(
        type="app",
        command="sh",
        args=["-c", 'echo "$SC_TEST_VALUE" > out.txt'],
        env={"SC_TEST_VALUE": "$SC_TEST_SOURCE"},
        working_dir=str(tmp_path),
    )
    AppExecutor(config).execute()
    assert _read_when_written(tmp_path / "out.txt") == "expanded-value\n"


def test_app_nonexistent_application():
    config = ActionConfig(type="app", command="/non/existent/application")
    with pytest.raises(ActionError, match="application not found"):
        AppExecutor(config).execute()


def test_app_environment_variable_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    config = ActionConfig(type="app", command="$HOME/non_existent")
    with pytest.raises(ActionError) as info:
        AppExecutor(config).execute()
    assert str(info.value) == f"application not found: {tmp_path}/non_existent"


# ScriptExecutor


def test_script_simple_echo(tmp_path):
    config = ActionConfig(type="script", command="echo test > out.txt", working_dir=str(tmp_path))
    ScriptExecutor(config).execute()
    assert (tmp_path / "out.txt").read_text() == "test\n"


def test_script_exit_codes(tmp_path):
    ok = ActionConfig(
        type="script", command="true && echo done > out.txt", working_dir=str(tmp_path)
    )
    ScriptExecutor(ok).execute()
    assert (tmp_path / "out.txt").read_text() == "done\n"

    failing = ActionConfig(type="script", command="false", working_dir=str(tmp_path))
    with pytest.raises(ActionError, match="script execution failed"):
        ScriptExecutor(failing).execute()


def test_script_working_directory(tmp_path):
    config = ActionConfig(type="script", command="pwd -P > out.txt", working_dir=str(tmp_path))
    ScriptExecutor(config).execute()
    assert (tmp_path / "out.txt").read_text() == os.path.realpath(tmp_path) + "\n"


def test_script_defaults_to_home_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    config = ActionConfig(type="script", command="pwd -P > out.txt")
    executor = ScriptExecutor(config)
    assert str(executor) == "Run script: pwd -P > out.txt"
    assert executor.execute() is None
    written = tmp_path / "out.txt"
    assert written.exists()
    assert written.read_text() == os.path.realpath(tmp_path) + "\n"


def test_script_environment_variable_in_command(tmp_path, monkeypatch):
    monkeypatch.setenv("SC_TEST_VALUE", "from-parent")
    config = ActionConfig(
        type="script", command="echo $SC_TEST_VALUE > out.txt", working_dir=str(tmp_path)
    )
    ScriptExecutor(config).execute()
    assert (tmp_path / "out.txt").read_text() == "from-parent\n"


def test_script_with_arguments_runs_directly(tmp_path):
    config = ActionConfig(
        type="script",
        command="sh -c",
        args=['echo "$SC_TEST_ARG" > out.txt'],
        env={"SC_TEST_ARG": "via-args"},
        working_dir=str(tmp_path),
    )
    ScriptExecutor(config).execute()
    assert _read_when_written(tmp_path / "out.txt") == "via-args\n"


@pytest.mark.parametrize("command", ["", "   "])
def test_script_empty_command(command):
    config = ActionConfig(type="script", command=command)
    with pytest.raises(ActionError, match="empty command"):
        ScriptExecutor(config).execute()


# String representation


@pytest.mark.parametrize(
    "executor, expected",
    [
        (
            AppExecutor(ActionConfig(type="app", command="/usr/bin/app", description="My cool app")),
            "My cool app",
        ),
        (AppExecutor(ActionConfig(type="app", command="/usr/bin/app")), "Launch /usr/bin/app"),
        (
            ScriptExecutor(
                ActionConfig(type="script", command="git status", description="Show git status")
            ),
            "Show git status",
        ),
        (
            ScriptExecutor(ActionConfig(type="script", command="git status")),
            "Run script: git status",
        ),
    ],
)
def test_executor_str(executor, expected):
    assert str(executor) == expected