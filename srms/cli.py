#!/usr/bin/env python3
"""
================================================================================
Student Record Management System | Console front end
================================================================================
Role-gated text menus over the student and credential stores.

ROLES:
  admin   : add / list / search / hard subjects / create user /
            reset password / backup / export report
  teacher : list / search / hard subjects / export report
  student : view a report by roll
  guest   : anonymised list / hard subjects

FILES (see srms.config for environment overrides):
  student.txt     student records
  credential.txt  login accounts (plain text passwords)
  logs.txt        audit trail

The process exit code is always 0.
================================================================================
"""
import logging
import re
import sys

from srms.analytics_engine import (
    detect_hard_subjects, estimate_graduation, cohort_table, ON_TRACK, IN_TIME,
)
from srms.audit_log import AuditLog
from srms.config import (
    LOG_LEVEL, MAX_USERS, MAX_SUBJECTS, ROLES, DEFAULT_ADMIN, HARD_FAIL_PCT, HARD_AVG,
)
from srms.credential_store import CredentialStore
from srms.errors import RecordSystemError, LockedOut
from srms.grade_engine import compute_cgpa
from srms import operations
from srms.record_store import RecordStore, StudentRecord
from srms.session import Session

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r'^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


# ══════════════════════════════════════════════════════════════════════════════
# INPUT HELPERS
# ══════════════════════════════════════════════════════════════════════════════
def read_line(prompt=""):
    """One line of console input; end of input reads as an empty line."""
    try:
        return input(prompt)
    except EOFError:
        return ""


def read_int(prompt=""):
    """Whole-number input. Re-prompts on junk; an empty line returns None."""
    while True:
        raw = read_line(prompt)
        if raw == "":
            return None
        try:
            return int(raw)
        except ValueError:
            print("Invalid number, try again.")


def lenient_float(raw):
    """Leading numeric prefix of raw, 0.0 when there is none (atof rules)."""
    match = _LEADING_NUMBER.match(raw)
    return float(match.group(0)) if match else 0.0


# ══════════════════════════════════════════════════════════════════════════════
# REPORTS
# ══════════════════════════════════════════════════════════════════════════════
def display_students(store, with_names=True):
    table = cohort_table(store, with_names)
    print(f"\n{'Roll':<5} {'Name':<12} {'Branch':<8} {'Sem':<4} {'Bkls':<4} {'CGPA':<6}")
    for row in table.itertuples(index=False):
        print(f"{row.Roll:<5} {row.Name:<12} {row.Branch:<8} {row.Sem:<4} {row.Bkls:<4} {row.CGPA:<6.2f}")


def print_graduation_forecast(record):
    forecast = estimate_graduation(record)
    print(f"Backlogs: {forecast['backlogs']}")
    if forecast['verdict'] == ON_TRACK:
        print("On track: can graduate in time.")
        return
    print(f"If you clear {forecast['clear_per_sem']} backlog(s) per sem, "
          f"you need ~{forecast['needed_semesters']} sem(s).")
    if forecast['verdict'] == IN_TIME:
        print("Can still graduate in time.")
    else:
        print("May not graduate in time at this pace.")


def view_student_report(record):
    print(f"\nRoll: {record.roll}\nName: {record.name}\nBranch: {record.branch}\n"
          f"Semester: {record.semester}\nAttendance: {record.attendance:.1f}")
    print(f"{'Subject':<15} {'Marks':<6}")
    for name, mark in record.subjects:
        print(f"{name:<15} {mark:<6.1f}")
    print(f"CGPA: {compute_cgpa(record):.2f}")
    print_graduation_forecast(record)


def print_hard_subjects(store):
    print(f"\nHard Subjects (fail%>{HARD_FAIL_PCT:.0f} and avg<{HARD_AVG:.0f}):")
    print(f"{'Subject':<20} {'Fail(%)':<10} {'Avg':<10}")
    for stat in detect_hard_subjects(store):
        print(f"{stat['subject']:<20} {stat['fail_pct']:<10.1f} {stat['avg']:<10.1f}")


def search_student(store):
    roll = read_int("Enter roll: ")
    if roll is None:
        return
    record = store.find_by_roll(roll)
    if record is None:
        print("Not found.")
        return
    view_student_report(record)


def export_report(store):
    roll = read_int("Enter roll: ")
    if roll is None:
        return
    record = store.find_by_roll(roll)
    if record is None:
        print("Not found.")
        return
    try:
        fname = operations.export_student_report(record)
    except OSError as exc:
        logger.error("Report export failed: %s", exc)
        print("Export failed.")
        return
    print(f"Report saved → {fname}")


# ══════════════════════════════════════════════════════════════════════════════
# RECORD & ACCOUNT MANAGEMENT
# ══════════════════════════════════════════════════════════════════════════════
def add_student(store, session):
    # Limit and roll are checked up front so the operator is not asked for
    # a full record that would be refused anyway.
    if store.is_full:
        print("Student limit reached.")
        return
    roll = read_int("Roll: ")
    if roll is None:
        return
    if store.find_by_roll(roll) is not None:
        print("Roll already exists.")
        return

    name       = read_line("Name: ")
    branch     = read_line("Branch: ")
    semester   = read_int("Semester (1-8): ") or 0
    count      = min(read_int(f"Number of subjects (max {MAX_SUBJECTS}): ") or 0, MAX_SUBJECTS)
    attendance = lenient_float(read_line("Attendance (0-100): "))

    subjects = []
    for i in range(count):
        subject = read_line(f"Subject {i + 1} name: ")
        mark    = lenient_float(read_line("Marks: "))
        subjects.append((subject, mark))

    record = StudentRecord(roll, name, branch, semester, attendance, subjects)
    try:
        saved = operations.add_student(store, record, session)
    except RecordSystemError as exc:
        print(exc)
        return
    if not saved:
        print("Could not save student file.")


def create_user(credentials, session):
    if len(credentials) >= MAX_USERS:
        print("User limit reached.")
        return
    username = read_line("New username: ")
    if credentials.find(username) is not None:
        print("User exists.")
        return
    password = read_line("Password: ")
    role     = read_line(f"Role ({'/'.join(ROLES)}): ")
    try:
        operations.create_user(credentials, username, password, role, session)
    except RecordSystemError as exc:
        print(exc)


def reset_password(credentials, session):
    username = read_line("Username to reset: ")
    if credentials.find(username) is None:
        print("User not found.")
        return
    new_password = read_line("New password: ")
    try:
        operations.reset_password(credentials, username, new_password, session)
    except RecordSystemError as exc:
        print(exc)


def backup_students(store, session):
    try:
        fname = operations.backup_students(store, session)
    except RecordSystemError as exc:
        print(exc)
        return
    print(f"Backup created: {fname}")


# ══════════════════════════════════════════════════════════════════════════════
# MENUS
# ══════════════════════════════════════════════════════════════════════════════
def _run_menu(title, options, session):
    """
    Show a numbered menu until its last option (logout) is chosen or an
    empty line is read.

    Args:
        title (str): heading, e.g. "ADMIN".
        options (list): (label, action) pairs; the last one logs out.
        session (Session): the bound session.
    """
    logout = len(options)
    while True:
        print(f"\n--- {title} MENU ({session.username}, last login: {session.previous_login}) ---")
        for i, (label, _) in enumerate(options, 1):
            print(f"{i}. {label}")
        choice = read_int("Choice: ")
        if choice is None:
            return
        if choice == logout:
            session.logout()
            return
        if 1 <= choice < logout:
            options[choice - 1][1]()
        else:
            print("Invalid.")


def admin_menu(session, credentials, store):
    _run_menu("ADMIN", [
        ("Add student",            lambda: add_student(store, session)),
        ("Display students",       lambda: display_students(store)),
        ("Search student",         lambda: search_student(store)),
        ("Hard subjects report",   lambda: print_hard_subjects(store)),
        ("Create user",            lambda: create_user(credentials, session)),
        ("Reset password",         lambda: reset_password(credentials, session)),
        ("Backup students",        lambda: backup_students(store, session)),
        ("Export student report",  lambda: export_report(store)),
        ("Logout",                 None),
    ], session)


def teacher_menu(session, credentials, store):
    _run_menu("TEACHER", [
        ("Display students",       lambda: display_students(store)),
        ("Search student",         lambda: search_student(store)),
        ("Hard subjects report",   lambda: print_hard_subjects(store)),
        ("Export student report",  lambda: export_report(store)),
        ("Logout",                 None),
    ], session)


def _view_own_report(store):
    # Any roll can be viewed; accounts are not linked to records.
    roll = read_int("Enter your roll: ")
    if roll is None:
        return
    record = store.find_by_roll(roll)
    if record is None:
        print("Not found.")
    else:
        view_student_report(record)


def student_menu(session, credentials, store):
    _run_menu("STUDENT", [
        ("View my report (by roll)", lambda: _view_own_report(store)),
        ("Logout",                   None),
    ], session)


def guest_menu(session, credentials, store):
    _run_menu("GUEST", [
        ("View overall stats (no names)", lambda: display_students(store, with_names=False)),
        ("Hard subjects report",          lambda: print_hard_subjects(store)),
        ("Logout",                        None),
    ], session)


MENUS = {
    "admin"   : admin_menu,
    "teacher" : teacher_menu,
    "student" : student_menu,
    "guest"   : guest_menu,
}


# ══════════════════════════════════════════════════════════════════════════════
# LOGIN & ENTRY POINT
# ══════════════════════════════════════════════════════════════════════════════
def login(session):
    while True:
        username = read_line("\nLogin\nUsername: ")
        password = read_line("Password: ")
        try:
            account = session.login(username, password)
        except LockedOut as exc:
            print("Invalid credentials.")
            print(exc)
            return None
        if account is not None:
            print(f"Login successful. Role: {account.role}\nLast login: {session.previous_login}")
            return account
        print("Invalid credentials.")


def run(credentials, store, session):
    credentials.load()
    if credentials.ensure_default_admin():
        print(f"Default admin created: username={DEFAULT_ADMIN[0]}, password={DEFAULT_ADMIN[1]}")
    store.load()

    if login(session) is None:
        return 0

    menu = MENUS.get(session.role)
    if menu is None:
        print("No menu for this role.")
        return 0
    menu(session, credentials, store)
    return 0


def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    credentials = CredentialStore()
    store       = RecordStore()
    session     = Session(credentials, AuditLog())
    return run(credentials, store, session)


if __name__ == "__main__":
    sys.exit(main())
