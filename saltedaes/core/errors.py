class SaltedAesError(Exception):
    """Base class for every failure raised by saltedaes."""


class ConfigurationError(SaltedAesError, ValueError):
    """Invalid encryption options."""


class InvalidKeySizeError(ConfigurationError):
    """Fixed key size is not 128, 192 or 256 bits."""


class UnsupportedPassphraseLengthError(SaltedAesError, ValueError):
    """Passphrase length cannot be mapped to an AES key size."""


class CipherInitError(SaltedAesError):
    """The cipher engine rejected the key, IV or mode combination."""


class EncryptionError(SaltedAesError):
    """Encryption transform failure."""


class DecryptionError(SaltedAesError, ValueError):
    """Decryption transform failure, e.g. wrong key or bad padding."""


class MalformedCiphertextError(DecryptionError):
    """Recovered salt length is inconsistent with the decrypted output."""
