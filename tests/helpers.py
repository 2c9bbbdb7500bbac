"""Test doubles shared across the responder tests."""
from __future__ import annotations


class RecordingSink:
    """Sink that records every call, optionally failing the first N writes."""

    def __init__(self, fail_writes: int = 0):
        self.calls: list[tuple] = []
        self.headers: dict[str, str] = {}
        self.status: int | None = None
        self.body = b""
        self._fail_writes = fail_writes

    def set_header(self, name: str, value: str) -> None:
        self.calls.append(("header", name, value))
        self.headers[name] = value

    def write_status(self, code: int) -> None:
        self.calls.append(("status", code))
        self.status = code

    def write(self, data: bytes) -> int:
        self.calls.append(("write", data))
        if self._fail_writes:
            self._fail_writes -= 1
            raise OSError("connection reset")
        self.body += data
        return len(data)
