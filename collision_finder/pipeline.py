"""Find (and optionally delete) a computer object colliding with the local host.

Linear sequence, no retries:

    dependency check -> identity -> search scope -> credential
    -> discovery (skipped with an explicit host) -> port-ping filter
    -> StartTLS filter (optional) -> search -> delete (optional)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from . import discovery, filters
from .ad.client import DirectoryClient
from .ad.models import NOT_FOUND, BindCredential, BindMode, DirectoryServer
from .ad_utils import bind_principal, domain_to_base_dn, split_host_port
from .crypto import decrypt_password
from .deps import verify_dependencies
from .errors import (
    MissingRequiredOption,
    NoCandidateServers,
    NoTLSCapableServers,
    UnsupportedDirectoryType,
)
from .utils.net import short_hostname

log = logging.getLogger(__name__)

SUPPORTED_LDAP_TYPES = ("AD",)


@dataclass
class RunOptions:
    domain: str
    join_user: str
    hostname: str
    ldap_type: str = "AD"
    ldap_host: str = ""
    site: str = ""
    password: str = ""
    crypt_string: str = ""
    crypt_key: str = ""
    cleanup: bool = True
    require_tls: bool = True


@dataclass
class PipelineContext:
    options: RunOptions
    credential: BindCredential
    search_scope: str
    servers: list[DirectoryServer] = field(default_factory=list)
    bind_mode: BindMode = BindMode.PLAIN

    def narrow(self, servers: list[DirectoryServer]) -> None:
        """Replace the candidate list with a subset of itself."""
        if self.servers and any(s not in self.servers for s in servers):
            raise ValueError("candidate list may only shrink")
        self.servers = list(servers)


@dataclass(frozen=True)
class RunResult:
    changed: bool
    comment: str
    dn: str = NOT_FOUND


def resolve_password(opts: RunOptions) -> str:
    if opts.password:
        return opts.password
    return decrypt_password(opts.crypt_string, opts.crypt_key)


def build_context(opts: RunOptions) -> PipelineContext:
    ldap_type = (opts.ldap_type or "").strip().upper()
    if ldap_type not in SUPPORTED_LDAP_TYPES:
        raise UnsupportedDirectoryType(f"Unsupported directory-type: {opts.ldap_type}")
    if not opts.domain:
        raise MissingRequiredOption("Domain name not specified")
    if not opts.join_user:
        raise MissingRequiredOption("Join user not specified")

    user = bind_principal(opts.join_user, opts.domain, ldap_type)
    scope = domain_to_base_dn(opts.domain)
    credential = BindCredential(username=user, password=resolve_password(opts))
    return PipelineContext(options=opts, credential=credential, search_scope=scope)


def candidate_servers(opts: RunOptions) -> list[DirectoryServer]:
    if opts.ldap_host:
        try:
            host, port = split_host_port(opts.ldap_host)
        except ValueError:
            raise MissingRequiredOption(f"Invalid directory host: {opts.ldap_host!r}")
        log.info("Using directory host %s:%d, skipping DNS discovery", host, port)
        return [DirectoryServer(host=host, port=port)]
    return discovery.discover_servers(opts.domain, opts.site)


def run(
    opts: RunOptions,
    check_dependencies: Optional[Callable[[], None]] = None,
) -> RunResult:
    # before anything imports ldap3, dnspython or cryptography
    (check_dependencies or verify_dependencies)()
    ctx = build_context(opts)

    ctx.narrow(candidate_servers(opts))
    ctx.narrow(filters.filter_reachable(ctx.servers))

    if opts.require_tls:
        log.info("Performing TLS-support test")
        tls = filters.filter_tls_capable(ctx.servers)
        ctx.narrow(tls.servers)
        ctx.bind_mode = tls.bind_mode
        if not ctx.servers:
            raise NoTLSCapableServers("No candidate server passed the TLS certificate check")
    else:
        log.info("Skipping TLS-support test")

    if not ctx.servers:
        raise NoCandidateServers("No usable directory servers")
    log.info("Found %d potentially-good directory servers", len(ctx.servers))

    target = ctx.servers[0]
    client = DirectoryClient(target, ctx.credential, ctx.bind_mode)
    host = short_hostname(opts.hostname)
    dn = client.find_computer(host, ctx.search_scope)

    if dn == NOT_FOUND:
        log.info("Could not find %s in %s", host, ctx.search_scope)
        return RunResult(changed=False, comment=f"No collision for {host} in {ctx.search_scope}")
    log.info("Found %s in %s", host, ctx.search_scope)

    if not opts.cleanup:
        log.info("Script called with 'no-cleanup' requested")
        return RunResult(changed=False, comment=f"Found {dn}; cleanup not requested", dn=dn)

    client.delete_object(dn)
    return RunResult(changed=True, comment=f"Deleted {dn}", dn=dn)
