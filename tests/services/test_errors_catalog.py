import pytest

from npmupgrader.errors_catalog import actionable_error


def test_actionable_error_formats_message_with_suggested_action():
    message = actionable_error("execution_policy_restricted", command="Set-ExecutionPolicy X")

    assert "Scripts cannot be executed" in message
    assert "Suggested action:" in message
    assert "`Set-ExecutionPolicy X`" in message


def test_versions_unavailable_suggests_explicit_version():
    message = actionable_error("versions_unavailable")

    assert "We could not show latest available versions." in message
    assert "npm-windows-upgrade --version:3.0.0" in message


def test_actionable_error_rejects_unknown_code():
    with pytest.raises(KeyError):
        actionable_error("does_not_exist")
