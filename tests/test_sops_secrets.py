"""Tests for SOPS-backed API key resolution."""

import logging

import pytest

from conftest import FakeRunner
from lyric_errors import SecretResolutionError
from sops_secrets import SopsSecretResolver


def test_get_api_key_returns_decrypted_key():
    runner = FakeRunner(stdout='{"api_key": "X"}')
    resolver = SopsSecretResolver(runner=runner)

    assert resolver.get_api_key("/work/secrets.json.enc") == "X"


def test_decrypt_runs_sops_with_captured_output():
    runner = FakeRunner(stdout='{"api_key": "X"}\n')
    resolver = SopsSecretResolver(runner=runner)

    content = resolver.decrypt("/work/secrets.json.enc")

    command, kwargs = runner.calls[0]
    assert command == ["sops", "-d", "/work/secrets.json.enc"]
    assert kwargs["capture_output"] is True
    assert kwargs["text"] is True
    assert kwargs["encoding"] == "utf-8"
    assert content == '{"api_key": "X"}\n'


def test_custom_sops_binary_is_used():
    resolver = SopsSecretResolver(runner=FakeRunner(), sops_binary="/opt/bin/sops")

    assert resolver.build_command("s.enc") == ["/opt/bin/sops", "-d", "s.enc"]


def test_decrypt_logs_checkpoints(caplog):
    resolver = SopsSecretResolver(runner=FakeRunner(stdout='{"api_key": "X"}'))

    with caplog.at_level(logging.INFO):
        resolver.get_api_key("secrets.json.enc")

    messages = [record.getMessage() for record in caplog.records]
    assert "Checkpoint: Starting SOPS decryption for file: secrets.json.enc" in messages
    assert "Executing command: sops -d secrets.json.enc" in messages
    assert "Checkpoint: Successfully decrypted content: Length: 16 characters." in messages


def test_nonzero_exit_fails():
    resolver = SopsSecretResolver(runner=FakeRunner(returncode=128, stderr="Failed to get the data key"))

    with pytest.raises(SecretResolutionError, match="return code: 128"):
        resolver.get_api_key("secrets.json.enc")


def test_empty_output_fails():
    resolver = SopsSecretResolver(runner=FakeRunner(stdout=""))

    with pytest.raises(SecretResolutionError, match="Failed to decrypt secrets file"):
        resolver.get_api_key("secrets.json.enc")


def test_non_json_output_fails():
    resolver = SopsSecretResolver(runner=FakeRunner(stdout="api_key: X\n"))

    with pytest.raises(SecretResolutionError, match="Error parsing decrypted JSON"):
        resolver.get_api_key("secrets.json.enc")


def test_missing_sops_binary_fails():
    resolver = SopsSecretResolver(runner=FakeRunner(error=FileNotFoundError("sops")))

    with pytest.raises(SecretResolutionError, match="Failed to run SOPS decryption command"):
        resolver.get_api_key("secrets.json.enc")


@pytest.mark.parametrize("payload", ['{"other": "value"}', '{"api_key": ""}', '["api_key"]'])
def test_missing_api_key_fails(payload):
    resolver = SopsSecretResolver(runner=FakeRunner(stdout=payload))

    with pytest.raises(SecretResolutionError, match="No api_key"):
        resolver.get_api_key("secrets.json.enc")


def test_non_utf8_output_fails():
    error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
    resolver = SopsSecretResolver(runner=FakeRunner(error=error))

    with pytest.raises(SecretResolutionError, match="not valid UTF-8"):
        resolver.get_api_key("secrets.json.enc")
