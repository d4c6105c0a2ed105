"""CLI entry point for find-collisions."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from pydantic import ValidationError

from .env_settings import EnvSettings, get_env
from .errors import (
    CollisionFinderError,
    MissingRequiredOption,
    MutuallyExclusiveArguments,
)
from .log_config import resolve_debug, setup_logging
from .pipeline import RunOptions, RunResult, run
from .utils.net import local_hostname

log = logging.getLogger(__name__)

PROG = "find-collisions"

MODE_CLEANUP = "cleanup"
MODE_SALTSTACK = "saltstack"

# dest -> flag, for error messages about empty values
_VALUE_FLAGS = {
    "join_crypt": "--join-crypt",
    "domain_name": "--domain-name",
    "hostname": "--hostname",
    "join_key": "--join-key",
    "ldap_host": "--ldap-host",
    "mode": "--mode",
    "join_password": "--join-password",
    "ad_site": "--ad-site",
    "ldap_type": "--ldap-type",
    "join_user": "--join-user",
}


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description="Find, and optionally delete, directory computer objects that collide with this host.",
    )
    parser.add_argument("-c", "--join-crypt", dest="join_crypt", help="Encrypted join password")
    parser.add_argument("-d", "--domain-name", dest="domain_name", help="Directory domain, e.g. example.com")
    parser.add_argument("-f", "--hostname", dest="hostname", help="Host to look for (default: this host)")
    parser.add_argument("-k", "--join-key", dest="join_key", help="Key to decrypt --join-crypt with")
    parser.add_argument(
        "-l",
        "--ldap-host",
        dest="ldap_host",
        help="Directory server as host[:port]; skips DNS discovery",
    )
    parser.add_argument(
        "--mode",
        dest="mode",
        help="'cleanup' deletes collisions, 'saltstack' deletes and prints SaltStack output, "
        "anything else only reports",
    )
    parser.add_argument("-p", "--join-password", dest="join_password", help="Cleartext join password")
    parser.add_argument("-s", "--ad-site", dest="ad_site", help="AD site to pick domain controllers from")
    parser.add_argument("-t", "--ldap-type", dest="ldap_type", help="Directory type (only AD is supported)")
    parser.add_argument("-u", "--join-user", dest="join_user", help="Account used to query the directory")
    parser.add_argument(
        "--no-tls-check",
        action="store_true",
        help="Skip the StartTLS certificate check and bind without TLS",
    )
    parser.add_argument("--debug", action="store_true", default=None, help="Echo log messages to stderr")
    return parser


def options_from_args(args: argparse.Namespace, env: EnvSettings) -> RunOptions:
    for dest, flag in _VALUE_FLAGS.items():
        if getattr(args, dest, None) == "":
            raise MissingRequiredOption(f"Error: option {flag} required but not specified")

    if args.join_password is not None and (args.join_crypt is not None or args.join_key is not None):
        raise MutuallyExclusiveArguments("--join-password cannot be combined with --join-crypt/--join-key")

    if args.mode is None:
        cleanup = env.cleanup
    else:
        cleanup = args.mode in (MODE_CLEANUP, MODE_SALTSTACK)

    # a cleartext password, from -p or CLEARPASS, wins over -c/-k
    if args.join_password is not None:
        password = args.join_password
    else:
        password = env.clear_password

    return RunOptions(
        domain=(args.domain_name or env.join_domain).strip(),
        join_user=(args.join_user or env.join_user).strip(),
        hostname=args.hostname or local_hostname(),
        ldap_type=args.ldap_type or "AD",
        ldap_host=args.ldap_host or "",
        site=args.ad_site or "",
        password=password,
        crypt_string=args.join_crypt or env.crypt_string,
        crypt_key=args.join_key or env.crypt_key,
        cleanup=cleanup,
        require_tls=env.require_tls and not args.no_tls_check,
    )


def salt_output(changed: bool, comment: str) -> str:
    """Last-line format understood by SaltStack's stateful cmd.run."""
    flag = "yes" if changed else "no"
    text = (comment or "").replace("'", '"').replace("\n", " ")
    return f"\nchanged={flag} comment='{text}'"


def _emit(result: RunResult, saltmode: bool) -> None:
    if saltmode:
        print(salt_output(result.changed, result.comment))
    else:
        print(result.comment)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        env = get_env()
    except ValidationError as e:
        print(f"{PROG}: invalid environment settings: {e}", file=sys.stderr)
        return 1

    debug = resolve_debug(True if args.debug else env.debug)
    setup_logging(PROG, env.log_facility, debug)
    saltmode = args.mode == MODE_SALTSTACK

    try:
        result = run(options_from_args(args, env))
    except CollisionFinderError as e:
        log.error("%s", e)
        if saltmode:
            print(salt_output(False, str(e)))
        elif not debug:
            print(f"{PROG}: {e}", file=sys.stderr)
        return e.exit_code

    _emit(result, saltmode)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
