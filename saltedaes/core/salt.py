import secrets
from typing import Union

from nacl.utils import random as nacl_random

from .format_config import MAX_SALT_LENGTH, SALT_HEADER_MASKS, SALT_HEADER_SIZE


def pack_length(header: Union[bytes, bytearray], length: int) -> bytes:
    """
    Embed `length` (0-255) into the first four bytes of `header`.

    Each byte keeps its own bits outside the mask and receives the bits of
    `length` that fall under the mask, so byte i carries bits 2i..2i+1.
    """
    if len(header) < SALT_HEADER_SIZE:
        raise ValueError(f"header must be at least {SALT_HEADER_SIZE} bytes")
    if not 0 <= length <= MAX_SALT_LENGTH:
        raise ValueError(f"length must be between 0 and {MAX_SALT_LENGTH}")

    packed = bytearray(header)
    for i, mask in enumerate(SALT_HEADER_MASKS):
        packed[i] = (packed[i] & ~mask & 0xFF) | (length & mask)
    return bytes(packed)


def unpack_length(header: Union[bytes, bytearray]) -> int:
    """Read back the length embedded by pack_length()."""
    if len(header) < SALT_HEADER_SIZE:
        raise ValueError(f"header must be at least {SALT_HEADER_SIZE} bytes")

    length = 0
    for i, mask in enumerate(SALT_HEADER_MASKS):
        length |= header[i] & mask
    return length


def random_nonzero_bytes(size: int) -> bytes:
    out = bytearray()
    while len(out) < size:
        out.extend(b for b in nacl_random(size - len(out)) if b)
    return bytes(out)


def random_salt_length(min_len: int, max_len: int) -> int:
    if min_len == max_len:
        return min_len
    return min_len + secrets.randbelow(max_len - min_len + 1)


def generate_salt(min_len: int, max_len: int) -> bytes:
    """
    Build a random salt whose first four bytes describe its own length.

    Lengths below the header size are raised to it so the header never
    spills into the plaintext.
    """
    if min_len < 0 or max_len > MAX_SALT_LENGTH or min_len > max_len:
        raise ValueError(f"salt length bounds must satisfy 0 <= min <= max <= {MAX_SALT_LENGTH}")

    length = max(random_salt_length(min_len, max_len), SALT_HEADER_SIZE)
    return pack_length(random_nonzero_bytes(length), length)
