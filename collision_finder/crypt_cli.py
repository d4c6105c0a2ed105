"""join-crypt: produce the CRYPTKEY/CRYPTSTRING pair find-collisions decrypts."""

from __future__ import annotations

import argparse
import getpass
import secrets
import shlex
from typing import Sequence

from .crypto import encrypt_password


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="join-crypt",
        description="Encrypt a join password (openssl aes-256-cbc, sha256, salted, base64).",
    )
    parser.add_argument("-p", "--password", help="Password to encrypt (prompted for when omitted)")
    parser.add_argument("-k", "--key", help="Encryption key (random when omitted)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    password = args.password if args.password is not None else getpass.getpass("Join password: ")
    if not password:
        print("join-crypt: empty password")
        return 1
    key = args.key or secrets.token_urlsafe(24)

    crypt = "".join(encrypt_password(password, key).split())
    print(f"CRYPTKEY={shlex.quote(key)}")
    print(f"CRYPTSTRING={shlex.quote(crypt)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
