from __future__ import annotations

import logging
import ssl
from typing import TYPE_CHECKING

from ..errors import (
    DirectoryBindFailure,
    DirectoryDeleteBadSyntax,
    DirectoryDeleteFailure,
    DirectorySearchFailure,
)
from .models import NOT_FOUND, BindCredential, BindMode, DirectoryServer
from .utils import computer_search_filter

if TYPE_CHECKING:
    from ldap3 import Connection

log = logging.getLogger(__name__)

CONNECT_TIMEOUT_S = 1.0
RESULT_SUCCESS = 0
RESULT_INVALID_DN_SYNTAX = 34


class DirectoryClient:
    """One directory server, simple bind, optionally upgraded with StartTLS.

    Every operation opens its own connection and unbinds when done.
    ldap3 is imported on use so a missing install is reported by the
    dependency check instead of an import error.
    """

    def __init__(
        self,
        target: DirectoryServer,
        credential: BindCredential | None = None,
        bind_mode: BindMode = BindMode.PLAIN,
        connect_timeout: float = CONNECT_TIMEOUT_S,
    ) -> None:
        from ldap3 import NONE, Server, Tls

        self.target = target
        self.credential = credential
        self.bind_mode = bind_mode

        # System trust store; no custom CA.
        tls = Tls(validate=ssl.CERT_REQUIRED)

        self.server = Server(
            host=target.host,
            port=target.port,
            use_ssl=False,
            get_info=NONE,
            tls=tls,
            connect_timeout=float(connect_timeout),
        )

    def _conn(self) -> Connection:
        from ldap3 import Connection

        user = self.credential.username if self.credential else None
        password = self.credential.password if self.credential else None
        conn = Connection(self.server, user=user, password=password, auto_bind=False)
        conn.open()
        if self.bind_mode is BindMode.REQUIRE_TLS:
            if not conn.start_tls():
                raise DirectoryBindFailure(f"StartTLS with {self.target} failed")
        return conn

    @staticmethod
    def _close(conn: Connection | None) -> None:
        try:
            if conn:
                conn.unbind()
        except Exception:
            pass

    def _bind(self, conn: Connection) -> None:
        if conn.bind():
            return
        res = dict(conn.result or {})
        who = self.credential.username if self.credential else "anonymous"
        raise DirectoryBindFailure(
            f"Bind to {self.target} as {who} failed: {res.get('description', 'unknown error')}"
        )

    def supports_starttls(self) -> bool:
        """StartTLS upgrade with certificate validation; no bind."""
        from ldap3 import Connection
        from ldap3.core.exceptions import LDAPException

        conn: Connection | None = None
        try:
            conn = Connection(self.server, auto_bind=False)
            conn.open()
            return bool(conn.start_tls())
        except (LDAPException, OSError) as e:
            log.debug("StartTLS probe of %s failed: %s", self.target, e)
            return False
        finally:
            self._close(conn)

    def find_computer(self, short_host: str, base_dn: str) -> str:
        """DN of the computer object named ``short_host``, or NOT_FOUND."""
        from ldap3 import NO_ATTRIBUTES, SUBTREE
        from ldap3.core.exceptions import LDAPException

        flt = computer_search_filter(short_host)
        conn: Connection | None = None
        try:
            conn = self._conn()
            self._bind(conn)
            conn.search(
                search_base=base_dn,
                search_filter=flt,
                search_scope=SUBTREE,
                attributes=NO_ATTRIBUTES,
            )
            res = dict(conn.result or {})
            entries = [r for r in (conn.response or []) if r.get("type") == "searchResEntry"]
        except LDAPException as e:
            raise DirectorySearchFailure(f"Search of {base_dn} on {self.target} failed: {e}")
        finally:
            self._close(conn)

        code = res.get("result", RESULT_SUCCESS)
        if code != RESULT_SUCCESS:
            raise DirectorySearchFailure(
                f"Search of {base_dn} on {self.target} failed with code {code}: "
                f"{res.get('description', 'unknown error')}"
            )

        if not entries:
            log.info("Did not find %s in %s", short_host, base_dn)
            return NOT_FOUND

        dn = str(entries[0].get("dn") or "")
        if not dn:
            log.info("Did not find %s in %s", short_host, base_dn)
            return NOT_FOUND
        log.info("Found %s on %s", dn, self.target.host)
        return dn

    def delete_object(self, dn: str) -> None:
        from ldap3.core.exceptions import LDAPException, LDAPInvalidDnError

        conn: Connection | None = None
        try:
            conn = self._conn()
            self._bind(conn)
            ok = bool(conn.delete(dn))
            res = dict(conn.result or {})
        except LDAPInvalidDnError:
            raise DirectoryDeleteBadSyntax(f"Delete of {dn} failed: bad DN syntax")
        except LDAPException as e:
            raise DirectoryDeleteFailure(f"Delete of {dn} failed: {e}")
        finally:
            self._close(conn)

        code = res.get("result")
        if ok or code == RESULT_SUCCESS:
            log.info("Delete of %s succeeded", dn)
            return
        if code == RESULT_INVALID_DN_SYNTAX:
            raise DirectoryDeleteBadSyntax(f"Delete of {dn} failed: bad DN syntax")
        raise DirectoryDeleteFailure(
            f"Delete of {dn} failed with exit-code '{code}': {res.get('description', 'unknown error')}",
            code=code,
        )
