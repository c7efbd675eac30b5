"""
Mutations invoked from the menus. Each one changes a store, saves it and
writes an audit line under the acting session's username.
"""
import json
import logging
import os
from datetime import datetime

from srms.analytics_engine import estimate_graduation
from srms.audit_log import timestamp
from srms.config import BACKUP_DIR, REPORT_DIR, PASS_MARK
from srms.errors import CapacityExceeded, DuplicateKey
from srms.grade_engine import apply_grace, compute_cgpa, count_backlogs

logger = logging.getLogger(__name__)


def _audit(session, action):
    if session is not None:
        session.audit(action)


def add_student(store, record, session=None):
    """
    Insert a new record, granting grace first if the policy allows it.

    Capacity and roll are checked before grace is applied, so a rejected
    record is never modified and nothing is audited for it.

    Returns:
        bool: whether the store was saved.
    """
    if store.is_full:
        raise CapacityExceeded("Student limit reached.")
    if store.find_by_roll(record.roll) is not None:
        raise DuplicateKey("Roll already exists.")

    apply_grace(record, session)
    store.add(record)
    saved = store.save()
    _audit(session, "Added student")
    return saved


def create_user(credentials, username, password, role, session=None):
    account = credentials.create(username, password, role)
    credentials.save()
    _audit(session, "Created user")
    return account


def reset_password(credentials, username, new_password, session=None):
    account = credentials.reset_password(username, new_password)
    credentials.save()
    _audit(session, "Password reset")
    return account


def backup_students(store, session=None, directory=BACKUP_DIR):
    target = store.backup(directory)
    _audit(session, "Backup created")
    logger.info("Student file backed up to %s", target)
    return target


def export_student_report(record, directory=REPORT_DIR):
    """
    Save a student's report as JSON.

    Returns:
        str: path of the report file.
    """
    forecast = estimate_graduation(record)
    report = {
        "system"          : "Student Record Management System",
        "generated_at"    : datetime.now().strftime("%Y-%m-%d %H:%M"),
        "student"         : {
            "roll"        : record.roll,
            "name"        : record.name,
            "branch"      : record.branch,
            "semester"    : record.semester,
            "attendance"  : record.attendance,
        },
        "subjects"        : [
            {"name": name, "mark": mark, "passed": mark >= PASS_MARK}
            for name, mark in record.subjects
        ],
        "summary"         : {
            "cgpa"        : round(compute_cgpa(record), 2),
            "backlogs"    : count_backlogs(record),
        },
        "graduation"      : forecast,
    }

    fname = os.path.join(directory, f"Student_Report_{record.roll}_{timestamp()}.json")
    with open(fname, 'w') as f:
        json.dump(report, f, indent=2)
    return fname
