import notekeeper.utils.auth_hash as auth_hash
from notekeeper.utils.auth_hash import PasswordHasher

hasher = PasswordHasher(rounds=4)


def test_hash_and_verify():
    pw = "correct horse battery staple"
    h = hasher.hash(pw)
    assert isinstance(h, str) and len(h) > 0
    assert pw not in h
    assert hasher.verify(pw, h) is True


def test_wrong_password_fails():
    h = hasher.hash("s3cret")
    assert hasher.verify("wrong", h) is False


def test_hashes_differ_for_same_password():
    pw = "repeatable"
    h1 = hasher.hash(pw)
    h2 = hasher.hash(pw)
    # salted, so two hashes differ
    assert h1 != h2
    assert hasher.verify(pw, h1)
    assert hasher.verify(pw, h2)


def test_verify_rejects_garbage_hash_and_none():
    assert hasher.verify("anything", "not-a-real-hash") is False
    assert hasher.verify(None, hasher.hash("x")) is False
    assert hasher.verify("x", None) is False


def test_pbkdf2_fallback_keeps_default_iterations(monkeypatch):
    real = auth_hash.CryptContext

    def no_bcrypt(schemes, **kwargs):
        if "bcrypt" in schemes:
            raise RuntimeError("bcrypt backend missing")
        return real(schemes=schemes, **kwargs)

    monkeypatch.setattr(auth_hash, "CryptContext", no_bcrypt)
    fallback = PasswordHasher(rounds=12)
    assert fallback.scheme == "pbkdf2_sha256"

    h = fallback.hash("s3cret")
    # $pbkdf2-sha256$<rounds>$<salt>$<checksum>
    assert h.startswith("$pbkdf2-sha256$")
    assert int(h.split("$")[2]) >= 29000
    assert fallback.verify("s3cret", h) is True
    assert fallback.verify("wrong", h) is False
