import hashlib

import pytest

from saltedaes.core import kdf as kdf_module
from saltedaes.core.errors import CipherInitError
from saltedaes.core.kdf import KDF_TABLE, derive_key
from saltedaes.core.options import PasswordHash


@pytest.mark.parametrize(
    "algorithm, hash_name",
    [
        (PasswordHash.MD5, "md5"),
        (PasswordHash.SHA1, "sha1"),
        (PasswordHash.SHA256, "sha256"),
        (PasswordHash.SHA384, "sha384"),
        (PasswordHash.SHA512, "sha512"),
    ],
)
def test_pbkdf2_matches_hashlib(algorithm, hash_name):
    expected = hashlib.pbkdf2_hmac(hash_name, b"passphrase", b"salt value", 3, 24)
    assert derive_key("passphrase", "salt value", algorithm, 3, 24) == expected


@pytest.mark.parametrize("length", [16, 24, 32])
def test_derived_key_has_requested_length(length):
    assert len(derive_key("0123456789ABCDEF", "s", PasswordHash.SHA256, 1, length)) == length


def test_different_salts_give_different_keys():
    key1 = derive_key("0123456789ABCDEF", "salt-one", PasswordHash.SHA1, 2, 16)
    key2 = derive_key("0123456789ABCDEF", "salt-two", PasswordHash.SHA1, 2, 16)
    assert key1 != key2


def test_argon2id_uses_iterations_as_time_cost(monkeypatch):
    captured = {}

    def fake_hash_secret_raw(**kwargs):
        captured.update(kwargs)
        return b"k" * kwargs["hash_len"]

    monkeypatch.setattr(kdf_module, "hash_secret_raw", fake_hash_secret_raw)

    key = derive_key("pass", "argon2 salt", PasswordHash.ARGON2ID, 4, 32)

    assert key == b"k" * 32
    assert captured["secret"] == b"pass"
    assert captured["salt"] == b"argon2 salt"
    assert captured["time_cost"] == 4
    assert captured["type"] == kdf_module.Type.ID


def test_argon2id_is_deterministic():
    key1 = derive_key("0123456789ABCDEF", "long enough salt", PasswordHash.ARGON2ID, 1, 16)
    key2 = derive_key("0123456789ABCDEF", "long enough salt", PasswordHash.ARGON2ID, 1, 16)
    assert key1 == key2
    assert len(key1) == 16


def test_argon2id_short_salt_fails():
    with pytest.raises(CipherInitError):
        derive_key("0123456789ABCDEF", "", PasswordHash.ARGON2ID, 1, 16)


def test_none_has_no_kdf():
    assert PasswordHash.NONE not in KDF_TABLE
    with pytest.raises(CipherInitError):
        derive_key("0123456789ABCDEF", "", PasswordHash.NONE, 1, 16)


def test_zero_iterations_fail():
    with pytest.raises(CipherInitError):
        derive_key("0123456789ABCDEF", "", PasswordHash.SHA1, 0, 16)
