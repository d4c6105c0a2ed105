"""Directory (LDAP) access used by the collision finder.

Public API:
    - DirectoryServer, BindCredential, BindMode, NOT_FOUND
    - DirectoryClient
"""

from .models import NOT_FOUND, BindCredential, BindMode, DirectoryServer
from .client import DirectoryClient

__all__ = ["NOT_FOUND", "BindCredential", "BindMode", "DirectoryServer", "DirectoryClient"]
