"""Narrow the candidate server list.

Both filters return a new list holding a subset of their input, in input
order; they never add or reorder servers.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .ad.client import DirectoryClient
from .ad.models import BindMode, DirectoryServer
from .errors import AllCandidatesUnreachable
from .utils.tcp_probe import tcp_probe

log = logging.getLogger(__name__)

PROBE_TIMEOUT_S = 1.0


def _starttls_probe(server: DirectoryServer) -> bool:
    return DirectoryClient(server, connect_timeout=PROBE_TIMEOUT_S).supports_starttls()


def filter_reachable(
    candidates: Iterable[DirectoryServer],
    probe: Optional[Callable[[str, int, float], bool]] = None,
    timeout_s: float = PROBE_TIMEOUT_S,
) -> list[DirectoryServer]:
    probe = probe or tcp_probe
    good: list[DirectoryServer] = []
    for ds in candidates:
        if probe(ds.host, ds.port, timeout_s):
            log.info("%s responds to port-ping", ds.host)
            good.append(ds)
        else:
            log.warning("%s did not respond to port-ping on %d", ds.host, ds.port)

    if not good:
        raise AllCandidatesUnreachable("All candidate servers failed port-ping")
    log.info("Found %d port-pingable directory servers", len(good))
    return good


@dataclass(frozen=True)
class TlsFilterResult:
    servers: list[DirectoryServer] = field(default_factory=list)
    bind_mode: BindMode = BindMode.PLAIN


def filter_tls_capable(
    candidates: Iterable[DirectoryServer],
    probe: Optional[Callable[[DirectoryServer], bool]] = None,
) -> TlsFilterResult:
    """Keep servers whose StartTLS certificate validates.

    Any survivor selects REQUIRE_TLS. With none, the result is empty and PLAIN;
    callers must treat that as fatal rather than bind in clear text.
    """
    probe = probe or _starttls_probe
    good: list[DirectoryServer] = []
    for ds in candidates:
        if probe(ds):
            log.info("Appending %s to 'good servers' list", ds.host)
            good.append(ds)
        else:
            log.warning("%s failed cert-check", ds.host)

    if good:
        return TlsFilterResult(servers=good, bind_mode=BindMode.REQUIRE_TLS)
    return TlsFilterResult(servers=[], bind_mode=BindMode.PLAIN)
