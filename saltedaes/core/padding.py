from typing import Callable, Dict, Tuple

from cryptography.hazmat.primitives import padding
from nacl.utils import random as nacl_random

from .format_config import BLOCK_SIZE, BLOCK_SIZE_BITS
from .options import PaddingMode


def _pad_none(data: bytes) -> bytes:
    if len(data) % BLOCK_SIZE:
        raise ValueError(f"Data length must be a multiple of {BLOCK_SIZE} bytes when padding is disabled")
    return data


def _unpad_none(data: bytes) -> bytes:
    return data


def _pad_pkcs7(data: bytes) -> bytes:
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    return padder.update(data) + padder.finalize()


def _unpad_pkcs7(data: bytes) -> bytes:
    unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
    return unpadder.update(data) + unpadder.finalize()


def _pad_ansix923(data: bytes) -> bytes:
    padder = padding.ANSIX923(BLOCK_SIZE_BITS).padder()
    return padder.update(data) + padder.finalize()


def _unpad_ansix923(data: bytes) -> bytes:
    unpadder = padding.ANSIX923(BLOCK_SIZE_BITS).unpadder()
    return unpadder.update(data) + unpadder.finalize()


def _pad_iso10126(data: bytes) -> bytes:
    count = BLOCK_SIZE - (len(data) % BLOCK_SIZE)
    return data + nacl_random(count - 1) + bytes([count])


def _unpad_iso10126(data: bytes) -> bytes:
    if not data or len(data) % BLOCK_SIZE:
        raise ValueError("Invalid padding bytes.")
    count = data[-1]
    if count < 1 or count > BLOCK_SIZE:
        raise ValueError("Invalid padding bytes.")
    return data[:-count]


def _pad_zeros(data: bytes) -> bytes:
    remainder = len(data) % BLOCK_SIZE
    if not remainder:
        return data
    return data + bytes(BLOCK_SIZE - remainder)


# Zero padding cannot be told apart from trailing zero plaintext bytes, so it
# is left in place on decryption.
PADDING_TABLE: Dict[PaddingMode, Tuple[Callable[[bytes], bytes], Callable[[bytes], bytes]]] = {
    PaddingMode.NONE: (_pad_none, _unpad_none),
    PaddingMode.PKCS7: (_pad_pkcs7, _unpad_pkcs7),
    PaddingMode.ANSIX923: (_pad_ansix923, _unpad_ansix923),
    PaddingMode.ISO10126: (_pad_iso10126, _unpad_iso10126),
    PaddingMode.ZEROS: (_pad_zeros, _unpad_none),
}


def pad(data: bytes, mode: PaddingMode) -> bytes:
    return PADDING_TABLE[mode][0](data)


def unpad(data: bytes, mode: PaddingMode) -> bytes:
    return PADDING_TABLE[mode][1](data)
