"""Password encryption compatible with ``openssl enc -aes-256-cbc -md sha256 -a -salt``.

Join credentials are stored in configuration data as base64 text of
``b"Salted__" + salt + ciphertext`` so they can be produced or read with the
openssl command line as well as with this module.

cryptography is imported on use, after the dependency check has run.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import os

from .errors import DecryptionFailure, MissingRequiredOption

_MAGIC = b"Salted__"
_SALT_LEN = 8
_KEY_LEN = 32
_IV_LEN = 16
_BLOCK_BITS = 128
# openssl's base64 BIO wraps at 64 columns and refuses longer lines without -A
_B64_LINE = 64


def _derive_key_iv(passphrase: bytes, salt: bytes) -> tuple[bytes, bytes]:
    """EVP_BytesToKey, SHA-256, one iteration."""
    out = b""
    block = b""
    while len(out) < _KEY_LEN + _IV_LEN:
        block = hashlib.sha256(block + passphrase + salt).digest()
        out += block
    return out[:_KEY_LEN], out[_KEY_LEN:_KEY_LEN + _IV_LEN]


def encrypt_password(plaintext: str, key: str, salt: bytes | None = None) -> str:
    from cryptography.hazmat.primitives import padding
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

    if not key:
        raise ValueError("empty encryption key")
    if salt is None:
        salt = os.urandom(_SALT_LEN)
    if len(salt) != _SALT_LEN:
        raise ValueError(f"salt must be {_SALT_LEN} bytes")

    k, iv = _derive_key_iv(key.encode("utf-8"), salt)
    padder = padding.PKCS7(_BLOCK_BITS).padder()
    data = padder.update((plaintext or "").encode("utf-8")) + padder.finalize()
    enc = Cipher(algorithms.AES(k), modes.CBC(iv)).encryptor()
    ct = enc.update(data) + enc.finalize()

    b64 = base64.b64encode(_MAGIC + salt + ct).decode("ascii")
    return "\n".join(b64[i:i + _B64_LINE] for i in range(0, len(b64), _B64_LINE))


def decrypt_password(crypt_string: str, key: str) -> str:
    from cryptography.hazmat.primitives import padding
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

    if not crypt_string or not key:
        raise MissingRequiredOption("Missing keystring-decryption values")

    try:
        raw = base64.b64decode("".join(crypt_string.split()), validate=True)
    except (binascii.Error, ValueError):
        raise DecryptionFailure("Decryption FAILED: ciphertext is not valid base64")

    header = len(_MAGIC) + _SALT_LEN
    body = raw[header:]
    if not raw.startswith(_MAGIC) or not body or len(body) % _IV_LEN:
        raise DecryptionFailure("Decryption FAILED: not an openssl salted ciphertext")

    salt = raw[len(_MAGIC):header]
    k, iv = _derive_key_iv(key.encode("utf-8"), salt)
    dec = Cipher(algorithms.AES(k), modes.CBC(iv)).decryptor()
    try:
        data = dec.update(body) + dec.finalize()
        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        clear = unpadder.update(data) + unpadder.finalize()
        text = clear.decode("utf-8")
    except ValueError:
        # bad padding or non-UTF-8 output: wrong key or corrupt input
        raise DecryptionFailure("Decryption FAILED: wrong key or corrupt ciphertext")

    # `$( echo ... | openssl enc -d )` drops trailing newlines
    return text.rstrip("\n")
