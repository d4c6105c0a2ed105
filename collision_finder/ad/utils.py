from __future__ import annotations


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def computer_search_filter(short_host: str) -> str:
    """Match a computer object by cn, trying the literal, upper and lower case name.

    Not every directory backend matches cn case-insensitively.
    """
    variants = (short_host, short_host.upper(), short_host.lower())
    alts = "".join(f"(cn={escape_ldap_filter_value(v)})" for v in variants)
    return f"(&(objectCategory=computer)(|{alts}))"
