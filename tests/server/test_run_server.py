from __future__ import annotations

import socket

import pytest

from run_server import find_available_port


def test_find_available_port_falls_back_when_port_in_use(monkeypatch: pytest.MonkeyPatch):
    calls: list[tuple[str, int]] = []

    class _DummyServer:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    def fake_create_server(addr, reuse_port=False):
        calls.append(addr)
        if len(calls) == 1:
            raise OSError("Address already in use")
        return _DummyServer()

    monkeypatch.setattr(socket, "create_server", fake_create_server)

    assert find_available_port("127.0.0.1", 8000, max_tries=10) == (8001, True)
    assert calls == [("127.0.0.1", 8000), ("127.0.0.1", 8001)]


def test_find_available_port_gives_up(monkeypatch: pytest.MonkeyPatch):
    def always_busy(addr, reuse_port=False):
        raise OSError("busy")

    monkeypatch.setattr(socket, "create_server", always_busy)

    with pytest.raises(RuntimeError, match="No available port"):
        find_available_port("127.0.0.1", 9000, max_tries=3)
    with pytest.raises(ValueError):
        find_available_port("127.0.0.1", 9000, max_tries=0)
