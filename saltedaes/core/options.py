from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import ConfigurationError, InvalidKeySizeError
from .format_config import KEY_SIZES


class PasswordHash(Enum):
    NONE = "none"
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    ARGON2ID = "argon2id"


class PaddingMode(Enum):
    NONE = "none"
    PKCS7 = "pkcs7"
    ANSIX923 = "ansix923"
    ISO10126 = "iso10126"
    ZEROS = "zeros"


def _coerce_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return enum_cls(text.lower().replace("-", ""))
        except ValueError:
            pass
        try:
            return enum_cls[text.upper().replace("-", "")]
        except KeyError:
            pass
    choices = ", ".join(member.value for member in enum_cls)
    raise ConfigurationError(f"{field_name} must be one of: {choices} (got {value!r})")


def validate_key_size(key_size: Optional[int]) -> None:
    if key_size is not None and key_size not in KEY_SIZES:
        raise InvalidKeySizeError(
            f"fixed_key_size must be None (auto-detect) or one of 128, 192, 256 (got {key_size!r})"
        )


@dataclass(frozen=True)
class EncryptionOptions:
    """
    Knobs for AesCrypt.

    fixed_key_size: 128, 192 or 256. None infers the size from the passphrase
        length (16, 24 or 32 bytes).
    password_hash: KDF applied to the passphrase. NONE uses the passphrase
        bytes as the key.
    password_hash_iterations: KDF iterations (Argon2 time cost for ARGON2ID).
    min_salt_length / max_salt_length: bounds of the random salt prepended to
        every plaintext. max_salt_length == 0 disables salting.
    password_hash_salt: KDF salt. Not the same thing as the plaintext salt.
    padding_mode: block padding scheme.
    """

    fixed_key_size: Optional[int] = None
    password_hash: Union[PasswordHash, str] = PasswordHash.SHA1
    password_hash_iterations: int = 1
    min_salt_length: int = 0
    max_salt_length: int = 0
    password_hash_salt: str = ""
    padding_mode: Union[PaddingMode, str] = PaddingMode.PKCS7

    def __post_init__(self):
        validate_key_size(self.fixed_key_size)
        object.__setattr__(self, "password_hash", _coerce_enum(PasswordHash, self.password_hash, "password_hash"))
        object.__setattr__(self, "padding_mode", _coerce_enum(PaddingMode, self.padding_mode, "padding_mode"))
        if self.password_hash_salt is None:
            object.__setattr__(self, "password_hash_salt", "")

    @property
    def use_salt(self) -> bool:
        return self.max_salt_length > 0 and self.max_salt_length >= self.min_salt_length
