"""Unit tests for response sink and request adapters."""

from __future__ import annotations

import pytest
from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Request

from respond.sinks import WerkzeugSink, as_request_meta


def test_new_sink_is_uncommitted_and_empty(sink: WerkzeugSink) -> None:
    assert not sink.committed
    assert sink.bytes_written == 0
    assert "Content-Type" not in sink.response.headers
    assert sink.response.get_data() == b""


def test_sink_collects_headers_status_and_body(sink: WerkzeugSink) -> None:
    sink.set_header("Content-Type", "text/plain")
    sink.write_status(201)
    assert sink.write(b"hello ") == 6
    sink.write(b"world")

    assert sink.response.status_code == 201
    assert sink.response.headers["Content-Type"] == "text/plain"
    assert sink.response.get_data() == b"hello world"
    assert sink.body == b"hello world"
    assert sink.bytes_written == 11


def test_headers_after_status_are_ignored(sink: WerkzeugSink, caplog) -> None:
    sink.write_status(200)
    sink.set_header("X-Late", "1")

    assert "X-Late" not in sink.response.headers
    assert "after status" in caplog.text


def test_second_status_is_ignored(sink: WerkzeugSink, caplog) -> None:
    sink.write_status(404)
    sink.write_status(200)

    assert sink.response.status_code == 404
    assert "Superfluous" in caplog.text


def test_write_without_status_commits_ok(sink: WerkzeugSink) -> None:
    sink.write(b"x")
    assert sink.committed
    assert sink.response.status_code == 200


def test_request_meta_from_werkzeug_request() -> None:
    request = Request(EnvironBuilder(headers={"Accept": "application/json"}).get_environ())
    assert as_request_meta(request).get_header("accept") == "application/json"


def test_request_meta_from_mapping_is_case_insensitive() -> None:
    meta = as_request_meta({"accept": "text/plain"})
    assert meta.get_header("Accept") == "text/plain"
    assert meta.get_header("X-Missing") == ""


def test_request_meta_passes_through_existing_meta() -> None:
    class Meta:
        def get_header(self, name: str) -> str:
            return "text/html"

    meta = Meta()
    assert as_request_meta(meta) is meta


def test_request_meta_rejects_unknown_objects() -> None:
    with pytest.raises(TypeError):
        as_request_meta(42)
