from __future__ import annotations

DEFAULT_LDAP_PORT = 389


def domain_to_base_dn(domain: str) -> str:
    domain = (domain or "").strip().strip(".")
    if not domain:
        return ""
    parts = [p for p in domain.split(".") if p]
    return ",".join([f"DC={p}" for p in parts])


def bind_principal(username: str, domain: str, ldap_type: str = "AD") -> str:
    u = (username or "").strip()
    d = (domain or "").strip().strip(".")
    if not u:
        return ""
    if (ldap_type or "").upper() != "AD":
        return u
    if "@" in u:
        return u
    return f"{u}@{d}" if d else u


def split_host_port(value: str, default_port: int = DEFAULT_LDAP_PORT) -> tuple[str, int]:
    """``dc1.example.com`` or ``dc1.example.com:636`` -> (host, port)."""
    s = (value or "").strip()
    if not s:
        raise ValueError("empty host")

    # bracketed IPv6: [::1]:389
    if s.startswith("["):
        host, _, rest = s[1:].partition("]")
        if rest.startswith(":"):
            return host, int(rest[1:])
        return host, default_port

    if s.count(":") == 1:
        host, port = s.split(":", 1)
        return host.strip(), int(port)
    return s, default_port
