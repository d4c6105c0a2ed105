from __future__ import annotations

import importlib.util
import logging

from .errors import MissingDependency

log = logging.getLogger(__name__)

# import name -> distribution that provides it
REQUIRED_MODULES: dict[str, str] = {
    "dns.resolver": "dnspython",
    "ldap3": "ldap3",
    "cryptography": "cryptography",
}


def _module_available(name: str) -> bool:
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        # find_spec imports parent packages; a missing parent raises
        return False


def verify_dependencies(required: dict[str, str] | None = None) -> None:
    for module, dist in (required or REQUIRED_MODULES).items():
        log.debug("Checking if dependency on %s is satisfied...", dist)
        if not _module_available(module):
            raise MissingDependency(f"Dependency on {dist} *not* satisfied")
        log.debug("Dependency on %s *is* satisfied", dist)
