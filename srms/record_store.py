"""
Student record store.

File layout, repeated per student::

    roll name branch semester numSubjects attendance
    subjectName mark            (numSubjects lines)

Semester, attendance and marks are stored as given; nothing is range-checked.
"""
import logging
import os
import shutil
from dataclasses import dataclass, field

from srms.audit_log import timestamp
from srms.config import STUDENT_FILE, MAX_STUDENTS, MAX_SUBJECTS
from srms.errors import DuplicateKey, CapacityExceeded, ParseTruncation, BackupError

logger = logging.getLogger(__name__)

MISSING_SUBJECT = ("NA", 0.0)


@dataclass
class StudentRecord:
    roll: int
    name: str
    branch: str
    semester: int
    attendance: float
    subjects: list = field(default_factory=list)  # [(name, mark), ...]

    @property
    def marks(self):
        return [mark for _, mark in self.subjects]

    def to_lines(self):
        lines = [f"{self.roll} {self.name} {self.branch} {self.semester} "
                 f"{len(self.subjects)} {self.attendance:.2f}\n"]
        lines += [f"{name} {mark:.2f}\n" for name, mark in self.subjects]
        return lines


def _parse_header(line):
    fields = line.split()
    if len(fields) != 6:
        raise ParseTruncation(f"expected 6 header fields, got {len(fields)}: {line.rstrip()!r}")
    roll, name, branch, semester, count, attendance = fields
    try:
        return int(roll), name, branch, int(semester), int(count), float(attendance)
    except ValueError as exc:
        raise ParseTruncation(f"bad header {line.rstrip()!r}: {exc}") from exc


def _parse_subject(line):
    fields = line.split() if line else []
    if len(fields) != 2:
        return MISSING_SUBJECT
    try:
        return fields[0], float(fields[1])
    except ValueError:
        return MISSING_SUBJECT


class RecordStore:
    def __init__(self, path=STUDENT_FILE):
        self.path    = path
        self.records = {}

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records.values())

    @property
    def is_full(self):
        return len(self.records) >= MAX_STUDENTS

    def load(self):
        """
        Replace the in-memory records with the contents of the file.

        The subject count in a header is clamped into [0, MAX_SUBJECTS]. A
        malformed subject line becomes ("NA", 0.0); a malformed header stops
        loading altogether and every record after it is lost.

        Returns:
            int: number of records loaded.
        """
        self.records = {}
        try:
            with open(self.path) as f:
                lines = [line for line in f if line.strip()]
        except FileNotFoundError:
            logger.info("No student file at %s, starting empty", self.path)
            return 0
        except OSError as exc:
            logger.error("Could not read %s: %s", self.path, exc)
            return 0

        pos = 0
        while pos < len(lines) and len(self.records) < MAX_STUDENTS:
            try:
                roll, name, branch, semester, count, attendance = _parse_header(lines[pos])
            except ParseTruncation as exc:
                logger.warning("%s: load stopped after %d records, %s",
                               self.path, len(self.records), exc)
                break
            pos  += 1
            count = max(0, min(MAX_SUBJECTS, count))

            subjects = []
            for _ in range(count):
                subjects.append(_parse_subject(lines[pos] if pos < len(lines) else None))
                pos += 1

            record = StudentRecord(roll, name, branch, semester, attendance, subjects)
            self.records.setdefault(roll, record)
        return len(self.records)

    def save(self):
        """Rewrite the whole file. Not atomic: a crash mid-write truncates it."""
        try:
            with open(self.path, "w") as f:
                for record in self.records.values():
                    f.writelines(record.to_lines())
        except OSError as exc:
            logger.error("Could not save students to %s: %s", self.path, exc)
            return False
        return True

    def add(self, record):
        if self.is_full:
            raise CapacityExceeded(f"student limit of {MAX_STUDENTS} reached")
        if record.roll in self.records:
            raise DuplicateKey(f"roll {record.roll} already exists")
        self.records[record.roll] = record
        return record

    def find_by_roll(self, roll):
        return self.records.get(roll)

    def backup(self, directory=".", stamp=None):
        """
        Copy the student file byte for byte to backup_student_<stamp>.txt.

        Returns:
            str: path of the backup file.
        """
        if not os.path.exists(self.path):
            raise BackupError("No student file to backup.")
        target = os.path.join(directory, f"backup_student_{stamp or timestamp()}.txt")
        try:
            shutil.copyfile(self.path, target)
        except OSError as exc:
            logger.error("Backup of %s to %s failed: %s", self.path, target, exc)
            raise BackupError("Backup failed.") from exc
        return target
