import json
import subprocess

import pytest


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Stands in for requests.Session; records every POST."""

    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


class FakeRunner:
    """Stands in for subprocess.run; returns a canned CompletedProcess."""

    def __init__(self, stdout="", returncode=0, stderr="", error=None):
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.error = error
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, self.returncode, self.stdout, self.stderr)


def scripted_input(answers):
    """Return an input() replacement that replays answers and records the prompts."""
    remaining = list(answers)
    prompts = []

    def fake_input(prompt=""):
        prompts.append(prompt)
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    fake_input.prompts = prompts
    return fake_input


@pytest.fixture
def fake_session_factory():
    def factory(body=None, status_code=200, error=None):
        response = None
        if body is not None:
            text = body if isinstance(body, str) else json.dumps(body)
            response = FakeResponse(text, status_code)
        return FakeSession(response=response, error=error)
    return factory
