from backend.auth.credentials import authenticate
from backend.auth.passwords import verify_password
from backend.models.user import User


def test_authenticate_returns_identity_without_hash(db, make_user) -> None:
    make_user('u-1', 'a@x.com', 'Ada Lovelace', role='admin')

    user = authenticate(db, 'a@x.com', 'pw1')

    assert user is not None
    assert user.user_id == 'u-1'
    assert user.full_name == 'Ada Lovelace'
    assert user.role == 'admin'
    assert 'password_hash' not in user.model_dump()


def test_authenticate_wrong_password_and_unknown_email_both_return_none(db, make_user) -> None:
    make_user('u-1', 'a@x.com', 'Ada Lovelace')

    assert authenticate(db, 'a@x.com', 'wrong') is None
    assert authenticate(db, 'nobody@x.com', 'pw1') is None


def test_authenticate_does_not_modify_user_row(db, make_user) -> None:
    make_user('u-1', 'a@x.com', 'Ada Lovelace')
    stored_hash = db.get(User, 'u-1').password_hash

    authenticate(db, 'a@x.com', 'pw1')
    authenticate(db, 'a@x.com', 'wrong')

    assert not db.dirty
    assert db.get(User, 'u-1').password_hash == stored_hash


def test_verify_password_treats_missing_or_malformed_hash_as_mismatch() -> None:
    assert verify_password('pw1', None) is False
    assert verify_password('pw1', '') is False
    assert verify_password('pw1', 'not-a-bcrypt-hash') is False
