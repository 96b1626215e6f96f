"""Password hashing helpers."""

from marketplace.security import hash_password, verify_and_update, verify_password


def test_hash_is_salted():
    assert hash_password("same") != hash_password("same")


def test_verify_round_trip():
    hashed = hash_password("correct horse")
    assert verify_password("correct horse", hashed)
    assert not verify_password("battery staple", hashed)


def test_malformed_hash_is_a_mismatch():
    assert verify_password("anything", "not-a-hash") is False
    assert verify_and_update("anything", "not-a-hash") == (False, None)


def test_current_hash_needs_no_update():
    valid, new_hash = verify_and_update("pw", hash_password("pw"))
    assert valid is True
    assert new_hash is None
