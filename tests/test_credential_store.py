import pytest

from srms.credential_store import Account, CredentialStore
from srms.errors import CapacityExceeded, DuplicateKey, InvalidField, NotFound


def test_create_sets_never_logged_in(credentials) -> None:
    account = credentials.create('amy', 'secret', 'teacher')

    assert account == Account('amy', 'secret', 'teacher', '-')


def test_duplicate_username_is_rejected(credentials) -> None:
    credentials.create('amy', 'secret', 'teacher')

    with pytest.raises(DuplicateKey):
        credentials.create('amy', 'other', 'guest')
    assert credentials.find('amy').password == 'secret'


def test_fifty_first_account_is_rejected(credentials) -> None:
    for i in range(50):
        credentials.create(f'user{i}', 'pw', 'guest')

    with pytest.raises(CapacityExceeded):
        credentials.create('extra', 'pw', 'guest')
    assert len(credentials) == 50
    assert credentials.find('extra') is None


def test_authenticate_is_exact_and_case_sensitive(credentials) -> None:
    credentials.create('amy', 'Secret', 'teacher')

    assert credentials.authenticate('amy', 'Secret').username == 'amy'
    assert credentials.authenticate('amy', 'secret') is None
    assert credentials.authenticate('Amy', 'Secret') is None
    assert credentials.authenticate('nobody', 'Secret') is None


def test_reset_password(credentials) -> None:
    credentials.create('amy', 'old', 'teacher')

    credentials.reset_password('amy', 'new')

    assert credentials.authenticate('amy', 'new') is not None
    with pytest.raises(NotFound):
        credentials.reset_password('ghost', 'x')


def test_fields_are_cut_to_legacy_widths(credentials) -> None:
    account = credentials.create('u' * 60, 'p' * 60, 'r' * 20)

    assert len(account.username) == 49
    assert len(account.password) == 49
    assert len(account.role) == 11


def test_save_and_load_round_trip(credentials) -> None:
    credentials.create('amy', 'pw1', 'teacher')
    credentials.create('bo', 'pw2', 'student').last_login = '202601011200'
    credentials.save()

    with open(credentials.path) as f:
        assert f.read() == 'amy pw1 teacher -\nbo pw2 student 202601011200\n'

    fresh = CredentialStore(credentials.path)
    assert fresh.load() == 2
    assert list(fresh) == list(credentials)


def test_malformed_line_stops_loading(credentials) -> None:
    with open(credentials.path, 'w') as f:
        f.write('amy pw teacher -\nbroken line\nbo pw student -\n')

    assert credentials.load() == 1
    assert credentials.find('bo') is None


def test_default_admin_only_when_empty(credentials) -> None:
    assert credentials.ensure_default_admin() is True
    assert credentials.authenticate('admin', 'admin').role == 'admin'
    assert credentials.ensure_default_admin() is False

    fresh = CredentialStore(credentials.path)
    fresh.load()
    assert fresh.find('admin') is not None


@pytest.mark.parametrize('username, password, role', [
    ('', 'pw', 'teacher'),
    ('amy lee', 'pw', 'teacher'),
    ('amy', '', 'teacher'),
    ('amy', 'pass word', 'teacher'),
    ('amy', 'pw', ''),
    ('amy', 'pw', 'head\tteacher'),
])
def test_create_rejects_fields_that_break_the_file(credentials, username, password, role) -> None:
    with pytest.raises(InvalidField):
        credentials.create(username, password, role)
    assert len(credentials) == 0


def test_blank_password_reset_keeps_every_account_loadable(credentials) -> None:
    credentials.create('amy', 'pw', 'teacher')
    credentials.create('bob', 'pw', 'admin')

    with pytest.raises(InvalidField):
        credentials.reset_password('amy', '')
    with pytest.raises(InvalidField):
        credentials.reset_password('amy', 'new pw')
    credentials.save()

    fresh = CredentialStore(credentials.path)
    assert fresh.load() == 2
    assert fresh.authenticate('amy', 'pw') is not None


def test_load_stops_at_account_cap(credentials) -> None:
    with open(credentials.path, 'w') as f:
        f.writelines(f'user{i} pw guest -\n' for i in range(60))

    assert credentials.load() == 50
    assert credentials.find('user49') is not None
    assert credentials.find('user50') is None


def test_save_into_missing_directory_returns_false(tmp_path) -> None:
    store = CredentialStore(str(tmp_path / 'missing' / 'credential.txt'))
    store.create('amy', 'pw', 'teacher')

    assert store.save() is False
