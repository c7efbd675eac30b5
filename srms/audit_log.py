import logging
from datetime import datetime

from srms.config import LOG_FILE, TIMESTAMP_FORMAT

logger = logging.getLogger(__name__)


def timestamp(moment=None):
    """Minute-resolution stamp used for audit lines, last logins and backups."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


class AuditLog:
    """
    Append-only audit trail.

    Each call writes one line ``[YYYYMMDDHHMM] username: action``. A failure
    to open the file drops the line; it never interrupts the caller.
    """

    def __init__(self, path=LOG_FILE, clock=timestamp):
        self.path  = path
        self.clock = clock

    def record(self, username, action):
        name = 'UNKNOWN' if username is None else username
        line = f"[{self.clock()}] {name}: {action}\n"
        try:
            with open(self.path, "a") as f:
                f.write(line)
        except OSError as exc:
            logger.warning("Audit line dropped (%s): %s", exc, line.strip())
