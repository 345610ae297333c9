from __future__ import annotations

from itertools import count
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from nissy_web.app import create_app
from nissy_web.config import Settings


class FakeRunner:
    """Stands in for NissyRunner and records every argument list it is given."""

    def __init__(self, output: str = "", error: Exception | None = None):
        self.output = output
        self.error = error
        self.calls: list[list[str]] = []

    async def run(self, args):
        self.calls.append(list(args))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def make_nissy(tmp_path):
    """Write an executable ``/bin/sh`` script that plays the solver."""
    numbers = count()

    def _make(body: str) -> Path:
        path = tmp_path / f"nissy-{next(numbers)}"
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def public_dir(tmp_path) -> Path:
    public = tmp_path / "public"
    (public / "assets").mkdir(parents=True)
    (public / "index.html").write_text("<h1>nissy</h1>")
    (public / "app.js").write_text("console.log('nissy');")
    (public / "style.css").write_text("body { margin: 0; }")
    (public / "notes.md").write_text("# notes")
    (tmp_path / "secret.txt").write_text("top secret")
    return public


@pytest.fixture
def settings(tmp_path, public_dir) -> Settings:
    return Settings(nissy_path=tmp_path / "nissy", public_dir=public_dir)


@pytest.fixture
def make_runner():
    """Build FakeRunner instances: ``make_runner(output=..., error=...)``."""
    return FakeRunner


@pytest.fixture
def runner(make_runner) -> FakeRunner:
    return make_runner(output="R U R'")


@pytest.fixture
def client(settings, runner) -> TestClient:
    return TestClient(create_app(settings, runner=runner))
