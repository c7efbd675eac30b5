"""
Credential store: login accounts kept one per line in a whitespace-separated
text file (``username password role lastLogin``).

Passwords are stored and compared as plain text. This matches the existing
file format and is a known weakness, not an oversight of this module.
"""
import logging
from dataclasses import dataclass

from srms.config import (
    CREDENTIAL_FILE, MAX_USERS, NEVER_LOGGED_IN, DEFAULT_ADMIN,
    USERNAME_LEN, PASSWORD_LEN, ROLE_LEN,
)
from srms.errors import DuplicateKey, CapacityExceeded, NotFound, ParseTruncation, InvalidField

logger = logging.getLogger(__name__)


def _check_field(label, value):
    # An empty or spaced field would shift the columns of its line on disk.
    if not value or any(ch.isspace() for ch in value):
        raise InvalidField(f"{label} must be non-empty and contain no spaces")


@dataclass
class Account:
    username: str
    password: str
    role: str
    last_login: str = NEVER_LOGGED_IN

    def to_line(self):
        return f"{self.username} {self.password} {self.role} {self.last_login or NEVER_LOGGED_IN}\n"

    @classmethod
    def from_line(cls, line):
        fields = line.split()
        if len(fields) != 4:
            raise ParseTruncation(f"expected 4 fields, got {len(fields)}: {line.rstrip()!r}")
        return cls(*fields)


class CredentialStore:
    def __init__(self, path=CREDENTIAL_FILE):
        self.path     = path
        self.accounts = {}

    def __len__(self):
        return len(self.accounts)

    def __iter__(self):
        return iter(self.accounts.values())

    def load(self):
        """
        Replace the in-memory accounts with the contents of the file.

        Loading stops silently at the first malformed line or once the
        capacity limit is reached; everything after that point is lost.
        A missing file leaves the store empty.

        Returns:
            int: number of accounts loaded.
        """
        self.accounts = {}
        try:
            with open(self.path) as f:
                for lineno, line in enumerate(f, 1):
                    if len(self.accounts) >= MAX_USERS:
                        break
                    if not line.strip():
                        continue
                    try:
                        account = Account.from_line(line)
                    except ParseTruncation as exc:
                        logger.warning("%s:%d: load stopped, %s", self.path, lineno, exc)
                        break
                    self.accounts.setdefault(account.username, account)
        except FileNotFoundError:
            logger.info("No credential file at %s, starting empty", self.path)
        except OSError as exc:
            logger.error("Could not read %s: %s", self.path, exc)
        return len(self.accounts)

    def save(self):
        """Rewrite the whole file. Not atomic: a crash mid-write truncates it."""
        try:
            with open(self.path, "w") as f:
                for account in self.accounts.values():
                    f.write(account.to_line())
        except OSError as exc:
            logger.error("Could not save accounts to %s: %s", self.path, exc)
            return False
        return True

    def find(self, username):
        return self.accounts.get(username)

    def authenticate(self, username, password):
        account = self.find(username)
        if account is not None and account.password == password:
            return account
        return None

    def create(self, username, password, role):
        if len(self.accounts) >= MAX_USERS:
            raise CapacityExceeded(f"account limit of {MAX_USERS} reached")
        _check_field("Username", username)
        _check_field("Password", password)
        _check_field("Role", role)
        username = username[:USERNAME_LEN]
        if username in self.accounts:
            raise DuplicateKey(f"user {username!r} already exists")
        account = Account(username, password[:PASSWORD_LEN], role[:ROLE_LEN], NEVER_LOGGED_IN)
        self.accounts[username] = account
        return account

    def reset_password(self, username, new_password):
        account = self.find(username)
        if account is None:
            raise NotFound(f"user {username!r} not found")
        _check_field("Password", new_password)
        account.password = new_password[:PASSWORD_LEN]
        return account

    def ensure_default_admin(self):
        """Create and save the bootstrap admin account if the store is empty."""
        if self.accounts:
            return False
        self.create(*DEFAULT_ADMIN)
        self.save()
        logger.info("Bootstrapped default admin account in %s", self.path)
        return True
