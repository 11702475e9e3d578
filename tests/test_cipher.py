import pytest

from clinic.security import FieldCipher, normalize_key
from clinic.security.cipher import IV_SIZE, KEY_SIZE


@pytest.fixture
def cipher():
    return FieldCipher.from_secret("unit-test-secret")


def test_round_trip(cipher):
    for value in ("Popescu", "1850101400017", "ana@example.com", "Str. Lungă 1, Cluj"):
        assert cipher.decrypt_field(cipher.encrypt_field(value)) == value


def test_token_shape(cipher):
    token = cipher.encrypt_field("Popescu")
    iv_hex, ct_hex = token.split(":")

    assert len(iv_hex) == IV_SIZE * 2
    assert len(ct_hex) % 32 == 0
    int(iv_hex, 16)
    int(ct_hex, 16)


def test_same_value_gives_different_tokens(cipher):
    first = cipher.encrypt_field("1850101400017")
    second = cipher.encrypt_field("1850101400017")

    assert first != second
    assert cipher.decrypt_field(first) == cipher.decrypt_field(second) == "1850101400017"


@pytest.mark.parametrize("value", [None, "", 0, 42, 3.5, ["a"], {"a": 1}])
def test_non_string_and_empty_pass_through(cipher, value):
    assert cipher.encrypt_field(value) == value
    assert cipher.decrypt_field(value) == value


@pytest.mark.parametrize(
    "value",
    [
        "plain text",
        "a:b:c",
        "Str. Lunga: 1",
        "zz:zz",
        "00:00",
        "00112233445566778899aabbccddeeff:0011",
    ],
)
def test_non_tokens_come_back_unchanged(cipher, value):
    assert cipher.decrypt_field(value) == value


def test_wrong_key_never_reveals(cipher):
    token = cipher.encrypt_field("1850101400017")
    other = FieldCipher.from_secret("some-other-secret")

    assert other.decrypt_field(token) != "1850101400017"


def test_normalize_key_pads_with_zero_characters():
    assert normalize_key("abc") == b"abc" + b"0" * (KEY_SIZE - 3)


def test_normalize_key_truncates():
    secret = "x" * 50
    assert normalize_key(secret) == b"x" * KEY_SIZE


def test_secrets_with_same_prefix_share_a_key():
    a = FieldCipher.from_secret("k" * KEY_SIZE + "first")
    b = FieldCipher.from_secret("k" * KEY_SIZE + "second")

    assert b.decrypt_field(a.encrypt_field("Ion")) == "Ion"


def test_raw_key_must_be_full_size():
    with pytest.raises(ValueError):
        FieldCipher(b"too-short")
