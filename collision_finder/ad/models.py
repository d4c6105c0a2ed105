from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Returned by the directory query instead of a DN when nothing matches.
NOT_FOUND = "NOTFOUND"


class BindMode(str, Enum):
    PLAIN = "plain"
    REQUIRE_TLS = "require_tls"


@dataclass(frozen=True)
class DirectoryServer:
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class BindCredential:
    username: str
    password: str = field(repr=False)
