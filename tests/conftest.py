from __future__ import annotations

import pytest

from collision_finder import log_config
from collision_finder.env_settings import get_env

_ENV_VARS = (
    "CLEARPASS",
    "CLEANUP",
    "CRYPTKEY",
    "CRYPTSTRING",
    "DEBUG",
    "JOIN_DOMAIN",
    "JOIN_USER",
    "LOGFACIL",
    "REQ_TLS",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # never write test runs into the host's syslog
    monkeypatch.setattr(log_config, "_SYSLOG_SOCKET", str(tmp_path / "no-syslog"))
    get_env.cache_clear()
    yield
    get_env.cache_clear()


class FakeDirectory:
    """In-memory stand-in for a directory server reached through ldap3.Connection."""

    def __init__(self) -> None:
        self.computers: dict[str, str] = {}
        self.bind_ok = True
        self.starttls_ok = True
        self.starttls_exc: Exception | None = None
        self.search_result = 0
        self.delete_result = 0
        self.delete_exc: Exception | None = None
        self.connections: list[FakeConnection] = []
        self.deleted: list[str] = []
        self.searches: list[tuple[str, str]] = []

    def add_computer(self, cn: str, dn: str) -> None:
        self.computers[cn] = dn

    def connection_factory(self):
        directory = self

        def _factory(server, user=None, password=None, auto_bind=False, **kwargs):
            conn = FakeConnection(directory, server, user, password)
            directory.connections.append(conn)
            return conn

        return _factory


class FakeConnection:
    def __init__(self, directory: FakeDirectory, server, user, password) -> None:
        self.directory = directory
        self.server = server
        self.user = user
        self.password = password
        self.calls: list[str] = []
        self.result: dict = {}
        self.response: list[dict] = []

    def open(self) -> None:
        self.calls.append("open")

    def start_tls(self) -> bool:
        self.calls.append("start_tls")
        if self.directory.starttls_exc is not None:
            raise self.directory.starttls_exc
        return self.directory.starttls_ok

    def bind(self) -> bool:
        self.calls.append("bind")
        if self.directory.bind_ok:
            self.result = {"result": 0, "description": "success"}
            return True
        self.result = {"result": 49, "description": "invalidCredentials"}
        return False

    def search(self, search_base, search_filter, search_scope=None, attributes=None, **kwargs) -> bool:
        self.calls.append("search")
        self.directory.searches.append((search_base, search_filter))
        code = self.directory.search_result
        self.result = {"result": code, "description": "success" if code == 0 else "operationsError"}
        self.response = [
            {"type": "searchResEntry", "dn": dn, "attributes": {}}
            for cn, dn in self.directory.computers.items()
            if f"(cn={cn})" in search_filter
        ]
        return bool(self.response) and code == 0

    def delete(self, dn) -> bool:
        self.calls.append("delete")
        if self.directory.delete_exc is not None:
            raise self.directory.delete_exc
        code = self.directory.delete_result
        self.result = {"result": code, "description": "success" if code == 0 else "error"}
        if code == 0:
            self.directory.deleted.append(dn)
        return code == 0

    def unbind(self) -> bool:
        self.calls.append("unbind")
        return True


@pytest.fixture
def directory(monkeypatch: pytest.MonkeyPatch) -> FakeDirectory:
    d = FakeDirectory()
    monkeypatch.setattr("ldap3.Connection", d.connection_factory())
    return d
