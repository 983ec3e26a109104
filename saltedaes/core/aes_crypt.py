import base64
import binascii
import logging
import threading
from enum import Enum
from typing import Optional, Union

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import (
    CipherInitError,
    DecryptionError,
    EncryptionError,
    MalformedCiphertextError,
    UnsupportedPassphraseLengthError,
)
from .format_config import PASSPHRASE_KEY_SIZES, SALT_HEADER_SIZE
from .kdf import derive_key
from .options import EncryptionOptions, PasswordHash, validate_key_size
from .padding import pad, unpad
from .salt import generate_salt, unpack_length

logger = logging.getLogger(__name__)


class CipherMode(Enum):
    ECB = "ECB"
    CBC = "CBC"


def _to_bytes(data: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    raise TypeError("data must be str, bytes, or bytearray")


def get_key_size(passphrase: str) -> int:
    """Map the passphrase byte length (16, 24, 32) to an AES key size in bits."""
    length = len(passphrase.encode("utf-8"))
    try:
        return PASSPHRASE_KEY_SIZES[length]
    except KeyError:
        raise UnsupportedPassphraseLengthError(
            f"AES passphrase must be 16, 24 or 32 bytes long (got {length})"
        )


class AesCrypt:
    """
    AES encryption keyed by a passphrase, with an optional self-describing
    random salt prepended to every plaintext.

    Without an IV the cipher runs in ECB mode, with one in CBC mode. The IV
    must encode to exactly 16 UTF-8 bytes.

    Key, IV and mode are fixed at construction. Encrypt and decrypt calls on
    one instance are serialized by a per-instance lock.
    """

    def __init__(self, passphrase: str, iv: Optional[str] = None,
                 options: Optional[EncryptionOptions] = None):
        self._options = options if options is not None else EncryptionOptions()
        self._lock = threading.Lock()

        validate_key_size(self._options.fixed_key_size)

        self._iv = iv.encode("utf-8") if iv else b""
        self._key_size = self._options.fixed_key_size or get_key_size(passphrase)

        if self._options.password_hash == PasswordHash.NONE:
            key = passphrase.encode("utf-8")
            if len(key) * 8 != self._key_size:
                raise CipherInitError(
                    f"Passphrase is {len(key)} bytes but the key size is {self._key_size} bits"
                )
        else:
            key = derive_key(
                passphrase,
                self._options.password_hash_salt,
                self._options.password_hash,
                self._options.password_hash_iterations,
                self._key_size // 8,
            )
        self._key = bytearray(key)

        self._mode = CipherMode.CBC if self._iv else CipherMode.ECB
        try:
            mode = modes.CBC(self._iv) if self._mode == CipherMode.CBC else modes.ECB()
            self._cipher: Optional[Cipher] = Cipher(algorithms.AES(bytes(self._key)), mode)
        except ValueError as exc:
            self.wipe()
            raise CipherInitError(f"Unable to initialize AES-{self._key_size} {self._mode.value}: {exc}") from exc

        logger.debug(
            "AesCrypt ready: AES-%d %s, password hash %s, padding %s, salt %s",
            self._key_size,
            self._mode.value,
            self._options.password_hash.value,
            self._options.padding_mode.value,
            f"{self._options.min_salt_length}-{self._options.max_salt_length}" if self.use_salt else "off",
        )

    @property
    def options(self) -> EncryptionOptions:
        return self._options

    @property
    def mode(self) -> CipherMode:
        return self._mode

    @property
    def key_size(self) -> int:
        return self._key_size

    @property
    def use_salt(self) -> bool:
        return self._options.use_salt

    def _require_cipher(self) -> Cipher:
        if self._cipher is None:
            raise CipherInitError("AesCrypt instance has been wiped")
        return self._cipher

    # Encryption

    def encrypt_to_bytes(self, data: Union[str, bytes, bytearray]) -> bytes:
        """Encrypt bytes (or UTF-8 text) and return raw cipher text."""
        plaintext = _to_bytes(data)

        if self.use_salt:
            try:
                salt = generate_salt(self._options.min_salt_length, self._options.max_salt_length)
            except ValueError as exc:
                raise EncryptionError(f"Unable to generate salt: {exc}") from exc
            plaintext = salt + plaintext

        with self._lock:
            cipher = self._require_cipher()
            try:
                padded = pad(plaintext, self._options.padding_mode)
                encryptor = cipher.encryptor()
                return encryptor.update(padded) + encryptor.finalize()
            except ValueError as exc:
                raise EncryptionError(f"Unable to encrypt data: {exc}") from exc

    def encrypt(self, data: Union[str, bytes, bytearray]) -> str:
        """Encrypt bytes (or UTF-8 text) and return base64 cipher text."""
        return base64.b64encode(self.encrypt_to_bytes(data)).decode("ascii")

    # Decryption

    def decrypt_to_bytes(self, data: Union[str, bytes, bytearray]) -> bytes:
        """
        Decrypt raw cipher text (or base64 text when given a str) and return
        the plaintext bytes with any salt removed.
        """
        if isinstance(data, str):
            try:
                ciphertext = base64.b64decode(data, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise DecryptionError(f"Cipher text is not valid base64: {exc}") from exc
        else:
            ciphertext = _to_bytes(data)

        with self._lock:
            cipher = self._require_cipher()
            try:
                decryptor = cipher.decryptor()
                decrypted = decryptor.update(ciphertext) + decryptor.finalize()
                decrypted = unpad(decrypted, self._options.padding_mode)
            except ValueError as exc:
                logger.warning("AES-%d %s decryption failed: %s", self._key_size, self._mode.value, exc)
                raise DecryptionError(f"Unable to decrypt data: {exc}") from exc

        if not self.use_salt:
            return decrypted

        if len(decrypted) < SALT_HEADER_SIZE:
            raise MalformedCiphertextError(
                f"Decrypted data is {len(decrypted)} bytes, too short for a salt header"
            )
        salt_len = unpack_length(decrypted)
        if salt_len > len(decrypted):
            raise MalformedCiphertextError(
                f"Salt length {salt_len} exceeds decrypted data length {len(decrypted)}"
            )
        return decrypted[salt_len:]

    def decrypt(self, data: Union[str, bytes, bytearray]) -> str:
        """Decrypt base64 text (or raw bytes) and return the plaintext as UTF-8 text."""
        plaintext = self.decrypt_to_bytes(data)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("Decrypted data is not valid UTF-8 text") from exc

    # Key hygiene

    def wipe(self) -> None:
        """Zero the key buffer and drop the prepared cipher."""
        with self._lock:
            key = getattr(self, "_key", None)
            if key is not None:
                for i in range(len(key)):
                    key[i] = 0
            self._cipher = None

    def __enter__(self) -> "AesCrypt":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.wipe()
        return False
