"""bcrypt hashing helpers."""

from recipebox.services.password import hash_password, verify_password


def test_hash_is_salted_and_verifies():
    first = hash_password("secret1", rounds=4)
    second = hash_password("secret1", rounds=4)
    assert first != second
    assert first.startswith("$2")
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)


def test_wrong_password_does_not_verify():
    stored = hash_password("secret1", rounds=4)
    assert not verify_password("secret2", stored)


def test_malformed_hash_never_matches():
    assert not verify_password("secret1", "plaintext-not-a-hash")


def test_long_passwords_truncate_consistently():
    base = "x" * 72
    stored = hash_password(base + "tail-a", rounds=4)
    assert verify_password(base + "tail-b", stored)
