import pytest

from collision_finder.crypto import decrypt_password, encrypt_password
from collision_finder.errors import DecryptionFailure, MissingRequiredOption


def test_decrypt_reproduces_encrypted_password() -> None:
    crypt = encrypt_password("S3cr3t!pa$$", "join-key")
    assert decrypt_password(crypt, "join-key") == "S3cr3t!pa$$"


def test_ciphertext_has_openssl_salted_header() -> None:
    import base64

    crypt = encrypt_password("pw", "k", salt=b"12345678")
    raw = base64.b64decode("".join(crypt.split()))
    assert raw[:8] == b"Salted__"
    assert raw[8:16] == b"12345678"
    assert (len(raw) - 16) % 16 == 0


def test_same_salt_is_deterministic_and_random_salt_is_not() -> None:
    assert encrypt_password("pw", "k", salt=b"abcdefgh") == encrypt_password("pw", "k", salt=b"abcdefgh")
    assert encrypt_password("pw", "k") != encrypt_password("pw", "k")


def test_long_ciphertext_is_wrapped_like_openssl() -> None:
    crypt = encrypt_password("x" * 200, "k")
    lines = crypt.splitlines()
    assert len(lines) > 1
    assert all(len(line) <= 64 for line in lines)
    assert decrypt_password(crypt, "k") == "x" * 200


def test_trailing_newline_is_dropped() -> None:
    crypt = encrypt_password("hunter2\n", "k")
    assert decrypt_password(crypt, "k") == "hunter2"


def test_wrong_key_fails() -> None:
    crypt = encrypt_password("correct horse battery staple", "right-key", salt=b"\x01\x02\x03\x04\x05\x06\x07\x08")
    with pytest.raises(DecryptionFailure):
        decrypt_password(crypt, "wrong-key")


@pytest.mark.parametrize("crypt,key", [("", "k"), ("U2FsdGVkX1", ""), ("", "")])
def test_missing_values_are_rejected(crypt: str, key: str) -> None:
    with pytest.raises(MissingRequiredOption):
        decrypt_password(crypt, key)


@pytest.mark.parametrize(
    "crypt",
    [
        "not base64 at all!!",
        "aGVsbG8gd29ybGQgdGhpcyBpcyBwbGFpbg==",  # no Salted__ header
        "U2FsdGVkX18xMjM0NTY3OA==",  # header and salt, no body
    ],
)
def test_malformed_ciphertext_fails(crypt: str) -> None:
    with pytest.raises(DecryptionFailure):
        decrypt_password(crypt, "k")
