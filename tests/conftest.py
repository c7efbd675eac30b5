import pytest

from srms.audit_log import AuditLog
from srms.credential_store import CredentialStore
from srms.record_store import RecordStore, StudentRecord
from srms.session import Session

FIXED_STAMP = '202610171230'


def make_record(roll=1, marks=(), semester=3, names=None):
    names = names or [f'Sub{i}' for i in range(len(marks))]
    return StudentRecord(roll, f'Student{roll}', 'CSE', semester, 88.5, list(zip(names, marks)))


@pytest.fixture
def audit_path(tmp_path):
    return tmp_path / 'logs.txt'


@pytest.fixture
def audit_log(audit_path):
    return AuditLog(str(audit_path), clock=lambda: FIXED_STAMP)


@pytest.fixture
def credentials(tmp_path):
    return CredentialStore(str(tmp_path / 'credential.txt'))


@pytest.fixture
def store(tmp_path):
    return RecordStore(str(tmp_path / 'student.txt'))


@pytest.fixture
def session(credentials, audit_log):
    return Session(credentials, audit_log, clock=lambda: FIXED_STAMP)


@pytest.fixture
def admin_session(credentials, session):
    credentials.create('root', 'pw', 'admin')
    session.login('root', 'pw')
    return session
