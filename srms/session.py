import logging

from srms.audit_log import AuditLog, timestamp
from srms.config import MAX_LOGIN_ATTEMPTS, NEVER_LOGGED_IN, FIRST_LOGIN
from srms.errors import LockedOut

logger = logging.getLogger(__name__)


class Session:
    """
    The single authenticated identity of one run.

    Failed attempts are counted in memory only; a lockout lasts until the
    process exits and nothing about it is persisted.
    """

    def __init__(self, credentials, audit_log=None, clock=timestamp):
        self.credentials     = credentials
        self.audit_log       = audit_log or AuditLog()
        self.clock           = clock
        self.account         = None
        self.previous_login  = None
        self.failed_attempts = 0

    @property
    def username(self):
        return self.account.username if self.account else None

    @property
    def role(self):
        return self.account.role if self.account else None

    @property
    def locked_out(self):
        return self.failed_attempts >= MAX_LOGIN_ATTEMPTS

    def audit(self, action):
        self.audit_log.record(self.username, action)

    def login(self, username, password):
        """
        Try one username/password pair.

        On success the account's stored last login is shown as the previous
        login and replaced with the current time, and the credential file is
        saved. Failures are audited under the username as typed.

        Returns:
            Account or None: the bound account, or None for a failed attempt.

        Raises:
            LockedOut: on the final allowed failure and on any call after it.
        """
        if self.locked_out:
            raise LockedOut("Too many attempts. Locked out.")

        account = self.credentials.authenticate(username, password)
        if account is None:
            self.failed_attempts += 1
            self.audit_log.record(username, "Login failed")
            if self.locked_out:
                logger.warning("Login locked out after %d failed attempts", self.failed_attempts)
                raise LockedOut("Too many attempts. Locked out.")
            return None

        previous = account.last_login
        if not previous or previous == NEVER_LOGGED_IN:
            previous = FIRST_LOGIN

        self.account         = account
        self.previous_login  = previous
        self.failed_attempts = 0
        account.last_login   = self.clock()
        self.credentials.save()
        self.audit("Login success")
        return account

    def logout(self):
        if self.account is None:
            return
        self.audit("Logout")
        self.account = None
