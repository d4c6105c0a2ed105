"""Logging setup for the collision finder.

Everything is sent to the local syslog socket, tagged with the program name
and PID, under the facility and priority given by LOGFACIL
(``facility.priority``, ``kern.crit`` by default). With debug enabled the
same lines are echoed to stderr.

- The priority is fixed: every record is logged with it, whatever its level.
- Unknown facility/priority names fall back to ``kern``/``crit``.
- No syslog socket (containers, CI): only the stderr handler, if any.
"""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import SysLogHandler

_SYSLOG_SOCKET = "/dev/log"
_DEFAULT_FACILITY = "kern"
_DEFAULT_PRIORITY = "crit"

# Track our handlers so a second setup_logging() call replaces them.
_syslog_handler: logging.Handler | None = None
_console_handler: logging.Handler | None = None


class FixedPrioritySysLogHandler(SysLogHandler):
    """SysLogHandler that ignores record levels and always uses one priority."""

    def __init__(self, priority: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._priority = priority

    def mapPriority(self, levelName: str) -> str:
        return self._priority


def parse_log_facility(value: str) -> tuple[int, str]:
    """Split ``facility.priority`` into (facility code, priority name)."""
    s = (value or "").strip().lower()
    fac_name, _, prio_name = s.partition(".")

    facility = SysLogHandler.facility_names.get(fac_name)
    if facility is None:
        facility = SysLogHandler.facility_names[_DEFAULT_FACILITY]
    if prio_name not in SysLogHandler.priority_names:
        prio_name = _DEFAULT_PRIORITY
    return facility, prio_name


def _remove_handlers(root: logging.Logger) -> None:
    global _syslog_handler, _console_handler

    for h in (_syslog_handler, _console_handler):
        if h is not None and h in root.handlers:
            root.removeHandler(h)
            try:
                h.close()
            except Exception:
                pass
    _syslog_handler = None
    _console_handler = None


def setup_logging(prog: str, log_facility: str = "kern.crit", debug: bool = False) -> None:
    global _syslog_handler, _console_handler

    root = logging.getLogger()
    _remove_handlers(root)

    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(f"{prog}[%(process)d]: %(message)s")

    if os.path.exists(_SYSLOG_SOCKET):
        facility, priority = parse_log_facility(log_facility)
        try:
            sh = FixedPrioritySysLogHandler(priority, address=_SYSLOG_SOCKET, facility=facility)
        except OSError:
            sh = None
        if sh is not None:
            sh.setLevel(level)
            sh.setFormatter(formatter)
            root.addHandler(sh)
            _syslog_handler = sh

    if debug:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(level)
        ch.setFormatter(formatter)
        root.addHandler(ch)
        _console_handler = ch

    root.setLevel(level)

    # ldap3 logs through its own machinery when enabled; keep it out of syslog
    logging.getLogger("ldap3").setLevel(max(level, logging.WARNING))


def resolve_debug(debug: bool | None) -> bool:
    """Unset DEBUG means verbose when run from a terminal."""
    if debug is not None:
        return bool(debug)
    try:
        return sys.stderr.isatty()
    except Exception:
        return False
