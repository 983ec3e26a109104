import pytest

from saltedaes.core import salt as salt_module
from saltedaes.core.format_config import SALT_HEADER_SIZE
from saltedaes.core.salt import generate_salt, pack_length, random_nonzero_bytes, unpack_length


@pytest.mark.parametrize("filler", [0x00, 0xFF, 0xA5, 0x5A])
def test_pack_unpack_is_inverse_for_every_length(filler):
    header = bytes([filler] * SALT_HEADER_SIZE)
    for length in range(256):
        assert unpack_length(pack_length(header, length)) == length


def test_pack_length_only_touches_masked_bits():
    packed = pack_length(b"\xff\xff\xff\xff", 0)
    assert packed == bytes([0xFC, 0xF3, 0xCF, 0x3F])

    packed = pack_length(b"\x00\x00\x00\x00", 0xFF)
    assert packed == bytes([0x03, 0x0C, 0x30, 0xC0])


def test_pack_length_keeps_bytes_after_header():
    body = b"\x11\x22\x33\x44\x55\x66"
    packed = pack_length(body, 6)
    assert packed[SALT_HEADER_SIZE:] == body[SALT_HEADER_SIZE:]
    assert len(packed) == len(body)


def test_pack_length_rejects_out_of_range_values():
    with pytest.raises(ValueError):
        pack_length(b"\x01\x01\x01\x01", 256)
    with pytest.raises(ValueError):
        pack_length(b"\x01\x01\x01\x01", -1)
    with pytest.raises(ValueError):
        pack_length(b"\x01\x01\x01", 3)
    with pytest.raises(ValueError):
        unpack_length(b"\x01\x01")


def test_generate_salt_fixed_length_embeds_its_length():
    for length in (4, 8, 16, 255):
        salt = generate_salt(length, length)
        assert len(salt) == length
        assert unpack_length(salt) == length


def test_generate_salt_short_lengths_are_raised_to_header_size():
    for length in range(SALT_HEADER_SIZE):
        salt = generate_salt(length, length)
        assert len(salt) == SALT_HEADER_SIZE
        assert unpack_length(salt) == SALT_HEADER_SIZE


def test_generate_salt_random_length_stays_in_bounds():
    seen = set()
    for _ in range(200):
        salt = generate_salt(5, 12)
        assert 5 <= len(salt) <= 12
        assert unpack_length(salt) == len(salt)
        seen.add(len(salt))
    assert len(seen) > 1


def test_generate_salt_body_has_no_zero_bytes():
    for _ in range(20):
        salt = generate_salt(64, 64)
        assert 0 not in salt[SALT_HEADER_SIZE:]


def test_generate_salt_rejects_bad_bounds():
    with pytest.raises(ValueError):
        generate_salt(0, 256)
    with pytest.raises(ValueError):
        generate_salt(10, 5)
    with pytest.raises(ValueError):
        generate_salt(-1, 5)


def test_random_nonzero_bytes_redraws_zero_bytes(monkeypatch):
    draws = [b"\x00\x07\x00", b"\x00\x09", b"\x0b"]
    monkeypatch.setattr(salt_module, "nacl_random", lambda size: draws.pop(0))

    assert random_nonzero_bytes(3) == b"\x07\x09\x0b"
    assert draws == []


def test_random_salt_length_uses_secure_source(monkeypatch):
    calls = []

    def fake_randbelow(n):
        calls.append(n)
        return n - 1

    monkeypatch.setattr(salt_module.secrets, "randbelow", fake_randbelow)

    assert salt_module.random_salt_length(4, 8) == 8
    assert salt_module.random_salt_length(6, 6) == 6
    assert calls == [5]
