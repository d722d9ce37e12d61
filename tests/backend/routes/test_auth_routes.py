import logging

from sqlalchemy.exc import OperationalError

from backend.auth import credentials, jwt_handler
from backend.auth.schemas import SessionUser
from backend.core import config

API = config.API_PREFIX


def test_login_returns_token_and_user_for_valid_credentials(client, make_user) -> None:
    make_user('u-1', 'a@x.com', 'Ada Lovelace', role='admin')

    response = client.post(f'{API}/login', json={'username': 'a@x.com', 'password': 'pw1'})

    assert response.status_code == 200
    body = response.json()
    assert body['user'] == {'userId': 'u-1', 'email': 'a@x.com', 'fullName': 'Ada Lovelace', 'role': 'admin'}
    assert jwt_handler.verify_token(f"Bearer {body['token']}").user_id == 'u-1'


def test_login_wrong_password_and_unknown_email_are_indistinguishable(client, make_user) -> None:
    make_user('u-1', 'a@x.com', 'Ada Lovelace')

    wrong_password = client.post(f'{API}/login', json={'username': 'a@x.com', 'password': 'nope'})
    unknown_email = client.post(f'{API}/login', json={'username': 'who@x.com', 'password': 'pw1'})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == {'error': 'Invalid credentials'}
    assert unknown_email.json() == wrong_password.json()


def test_login_requires_both_fields(client) -> None:
    response = client.post(f'{API}/login', json={'username': 'a@x.com'})

    assert response.status_code == 400
    assert response.json() == {'error': 'Email and password are required'}


def test_login_rejects_non_json_body_with_400(client) -> None:
    response = client.post(f'{API}/login', content='username=a', headers={'Content-Type': 'text/plain'})

    assert response.status_code == 400
    assert 'error' in response.json()


def test_verify_returns_claims_for_valid_token(client) -> None:
    user = SessionUser(user_id='u-1', email='a@x.com', full_name='Ada Lovelace', role='user')
    token = jwt_handler.issue_token(user)

    response = client.get(f'{API}/verify', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 200
    assert response.json() == {
        'user': {'userId': 'u-1', 'email': 'a@x.com', 'fullName': 'Ada Lovelace', 'role': 'user'},
    }


def test_verify_distinguishes_missing_and_invalid_tokens(client) -> None:
    missing = client.get(f'{API}/verify')
    wrong_scheme = client.get(f'{API}/verify', headers={'Authorization': 'Basic abc'})
    invalid = client.get(f'{API}/verify', headers={'Authorization': 'Bearer abc.def.ghi'})

    assert missing.status_code == 401
    assert missing.json() == {'error': 'No token provided'}
    assert wrong_scheme.json() == {'error': 'No token provided'}
    assert invalid.status_code == 401
    assert invalid.json() == {'error': 'Invalid token'}


def test_verify_rejects_expired_token(client) -> None:
    user = SessionUser(user_id='u-1', email='a@x.com', full_name='Ada Lovelace', role='user')
    expired = jwt_handler.issue_token(user, expires_minutes=-5)

    response = client.get(f'{API}/verify', headers={'Authorization': f'Bearer {expired}'})

    assert response.status_code == 401
    assert response.json() == {'error': 'Invalid token'}


def test_root_reports_status(client) -> None:
    response = client.get('/')

    assert response.status_code == 200
    assert response.json() == {'status': 'Education Tracker API Running'}


def test_login_database_failure_returns_generic_500_and_logs_details(client, monkeypatch, caplog) -> None:
    def fail(*args, **kwargs):
        raise OperationalError('SELECT 1', {}, Exception('connection refused'))

    monkeypatch.setattr(credentials, 'authenticate', fail)

    with caplog.at_level(logging.ERROR, logger='backend.routes.auth_routes'):
        response = client.post(f'{API}/login', json={'username': 'a@x.com', 'password': 'pw1'})

    assert response.status_code == 500
    assert response.json() == {'error': 'Internal server error'}
    assert 'connection refused' not in response.text
    assert 'Login lookup failed' in caplog.text
    assert 'connection refused' in caplog.text
