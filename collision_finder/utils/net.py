from __future__ import annotations

import socket


def short_hostname(name: str) -> str:
    s = (name or "").strip().rstrip(".")
    if not s:
        return ""
    return s.split(".", 1)[0]


def local_hostname() -> str:
    return socket.gethostname()
