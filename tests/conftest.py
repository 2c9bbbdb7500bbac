"""Shared fixtures for responder tests."""
from __future__ import annotations

import pytest

from respond import Responder, WerkzeugSink
from tests.helpers import RecordingSink


@pytest.fixture()
def fresh_default():
    """Start and end with no shared default responder."""
    Responder.reset_default()
    yield
    Responder.reset_default()


@pytest.fixture()
def sink() -> WerkzeugSink:
    return WerkzeugSink()


@pytest.fixture()
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def responder() -> Responder:
    """Initialized responder with default options."""
    return Responder.new_initialized()


@pytest.fixture()
def views_dir(tmp_path):
    """Views directory with a page, a nested page and a layout."""
    views = tmp_path / "views"
    (views / "home").mkdir(parents=True)
    (views / "layouts").mkdir()
    (views / "hello.html").write_text("Hello {{ name }}!", encoding="utf-8")
    (views / "home" / "index.tpl").write_text(
        "<h1>{{ title }}</h1>", encoding="utf-8"
    )
    (views / "layouts" / "main.html").write_text(
        "<html><body>{{ content }}</body></html>", encoding="utf-8"
    )
    (views / "notes.txt").write_text("not a template {{", encoding="utf-8")
    return views
