"""Find candidate domain controllers through DNS SRV records."""
from __future__ import annotations

import logging

from .ad.models import DirectoryServer
from .errors import NoCandidateServers

log = logging.getLogger(__name__)

LDAP_SRV_FORMAT = "_ldap._tcp.dc._msdcs.{domain}"
LDAP_SITE_SRV_FORMAT = "_ldap._tcp.{site}._sites.dc._msdcs.{domain}"


def srv_query_name(domain: str, site: str = "") -> str:
    domain = (domain or "").strip().strip(".")
    site = (site or "").strip()
    if site:
        return LDAP_SITE_SRV_FORMAT.format(site=site, domain=domain)
    return LDAP_SRV_FORMAT.format(domain=domain)


def _query_srv(qname: str) -> list[tuple[int, str]]:
    """(port, target) pairs in the order the resolver returned them."""
    import dns.exception
    import dns.resolver

    try:
        answers = dns.resolver.resolve(qname, "SRV")
    except dns.resolver.NXDOMAIN:
        raise NoCandidateServers(f"No such DNS name: {qname}")
    except dns.resolver.NoAnswer:
        return []
    except dns.exception.DNSException as e:
        raise NoCandidateServers(f"SRV lookup of {qname} failed: {e}")

    return [(int(rr.port), rr.target.to_text()) for rr in answers]


def discover_servers(domain: str, site: str = "") -> list[DirectoryServer]:
    """Candidate directory servers, in DNS response order.

    Priority and weight are ignored.
    """
    qname = srv_query_name(domain, site)
    log.debug("Looking up SRV records for %s", qname)

    out: list[DirectoryServer] = []
    for port, target in _query_srv(qname):
        host = (target or "").strip().rstrip(".")
        if host:
            out.append(DirectoryServer(host=host, port=port))

    if not out:
        raise NoCandidateServers("Unable to generate a list of candidate servers")
    log.info("Found %d candidate directory-servers", len(out))
    return out
