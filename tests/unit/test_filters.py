import pytest

from collision_finder import filters
from collision_finder.ad.models import BindMode, DirectoryServer
from collision_finder.errors import AllCandidatesUnreachable

DC1 = DirectoryServer("dc1", 389)
DC2 = DirectoryServer("dc2", 636)
DC3 = DirectoryServer("dc3", 389)


def test_unreachable_candidate_is_dropped() -> None:
    probed = []

    def probe(host, port, timeout_s):
        probed.append((host, port, timeout_s))
        return host == "dc2"

    assert filters.filter_reachable([DC1, DC2], probe=probe) == [DC2]
    assert probed == [("dc1", 389, 1.0), ("dc2", 636, 1.0)]


def test_reachable_never_grows_or_reorders() -> None:
    candidates = [DC3, DC1, DC2]
    result = filters.filter_reachable(candidates, probe=lambda h, p, t: h != "dc1")
    assert result == [DC3, DC2]
    assert len(result) <= len(candidates)
    assert candidates == [DC3, DC1, DC2]


def test_all_unreachable_is_fatal() -> None:
    with pytest.raises(AllCandidatesUnreachable):
        filters.filter_reachable([DC1, DC2], probe=lambda h, p, t: False)


def test_default_port_check_is_looked_up_at_call_time(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(filters, "tcp_probe", lambda h, p, t: True)
    assert filters.filter_reachable([DC1]) == [DC1]


def test_tls_filter_drops_only_failing_servers() -> None:
    result = filters.filter_tls_capable([DC1, DC2, DC3], probe=lambda ds: ds is not DC1)
    assert result.servers == [DC2, DC3]
    assert result.bind_mode is BindMode.REQUIRE_TLS


def test_tls_filter_with_no_passing_server_is_empty_and_plain() -> None:
    result = filters.filter_tls_capable([DC1, DC2], probe=lambda ds: False)
    assert result.servers == []
    assert result.bind_mode is BindMode.PLAIN


def test_tls_check_uses_starttls(directory) -> None:
    directory.starttls_ok = True
    assert filters.filter_tls_capable([DC1]).servers == [DC1]
    assert directory.connections[0].calls == ["open", "start_tls", "unbind"]

    directory.starttls_ok = False
    assert filters.filter_tls_capable([DC1]).servers == []
