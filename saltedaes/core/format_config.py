"""
Constants shared by the salted AES format.

Plaintext layout before padding (salting enabled):
  - salt (min_salt_length..max_salt_length bytes, never less than 4)
      bytes 0-3: two bits of the salt length each, kept at their own bit
                 position (byte 0 -> bits 0-1, byte 1 -> bits 2-3,
                 byte 2 -> bits 4-5, byte 3 -> bits 6-7)
      remaining: random non-zero bytes
  - plaintext (variable)
"""

BLOCK_SIZE = 16
BLOCK_SIZE_BITS = BLOCK_SIZE * 8

KEY_SIZES = (128, 192, 256)

# Passphrase byte length -> key size in bits
PASSPHRASE_KEY_SIZES = {
    16: 128,
    24: 192,
    32: 256,
}

SALT_HEADER_SIZE = 4
SALT_HEADER_MASKS = (0x03, 0x0C, 0x30, 0xC0)
MAX_SALT_LENGTH = 0xFF

DEFAULT_ARGON2_MEMORY_COST_KIB = 65536
DEFAULT_ARGON2_PARALLELISM = 1
