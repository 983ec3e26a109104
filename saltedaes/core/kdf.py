from typing import Callable, Dict, Union

from argon2.low_level import hash_secret_raw, Type
from argon2.exceptions import HashingError
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import CipherInitError
from .format_config import DEFAULT_ARGON2_MEMORY_COST_KIB, DEFAULT_ARGON2_PARALLELISM
from .options import PasswordHash


def _to_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypeError("value must be str, bytes, or bytearray")


def _pbkdf2(algorithm: hashes.HashAlgorithm) -> Callable[[bytes, bytes, int, int], bytes]:
    def derive(password: bytes, salt: bytes, iterations: int, length: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=algorithm,
            length=length,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(password)
    return derive


def _argon2id(password: bytes, salt: bytes, iterations: int, length: int) -> bytes:
    return hash_secret_raw(
        secret=password,
        salt=salt,
        time_cost=iterations,
        memory_cost=DEFAULT_ARGON2_MEMORY_COST_KIB,
        parallelism=DEFAULT_ARGON2_PARALLELISM,
        hash_len=length,
        type=Type.ID
    )


KDF_TABLE: Dict[PasswordHash, Callable[[bytes, bytes, int, int], bytes]] = {
    PasswordHash.MD5: _pbkdf2(hashes.MD5()),
    PasswordHash.SHA1: _pbkdf2(hashes.SHA1()),
    PasswordHash.SHA256: _pbkdf2(hashes.SHA256()),
    PasswordHash.SHA384: _pbkdf2(hashes.SHA384()),
    PasswordHash.SHA512: _pbkdf2(hashes.SHA512()),
    PasswordHash.ARGON2ID: _argon2id,
}


def derive_key(password: Union[str, bytes, bytearray],
               salt: Union[str, bytes, bytearray],
               algorithm: PasswordHash,
               iterations: int,
               length: int) -> bytes:
    """
    Stretch a passphrase into a key of `length` bytes with the configured
    password hash. PasswordHash.NONE has no entry; callers use the raw
    passphrase bytes for it.
    """
    try:
        kdf = KDF_TABLE[algorithm]
    except KeyError:
        raise CipherInitError(f"No key derivation function for password hash {algorithm!r}")

    if iterations < 1:
        raise CipherInitError("password_hash_iterations must be at least 1")

    try:
        return kdf(_to_bytes(password), _to_bytes(salt), iterations, length)
    except (ValueError, TypeError, HashingError) as exc:
        raise CipherInitError(f"Key derivation with {algorithm.value} failed: {exc}") from exc
