"""
Per-student grade metrics and the one-time grace-mark policy.

Marks are on a 0-100 scale; CGPA is reported on a 0-10 scale.
"""
import numpy as np

from srms.config import PASS_MARK, GRACE_MAX_DEFICIT, GRACE_MERIT_AVERAGE, GRACE_MERIT_DEFICIT


def compute_cgpa(record):
    """Average mark divided by 10, or 0.0 for a record without subjects."""
    if not record.subjects:
        return 0.0
    return float(np.sum(record.marks)) / (len(record.subjects) * 10.0)


def count_backlogs(record):
    return sum(1 for mark in record.marks if mark < PASS_MARK)


def grace_eligible(marks):
    """
    Decide whether a set of marks qualifies for grace.

    Only a record with exactly one failing subject qualifies; zero fails or
    two and more fails never do. The single fail is raised when its deficit
    is within GRACE_MAX_DEFICIT, or within GRACE_MERIT_DEFICIT for a student
    averaging at least GRACE_MERIT_AVERAGE.

    Args:
        marks (list): marks in subject order.

    Returns:
        int or None: index of the mark to raise, None if no grace applies.
    """
    failing = [i for i, mark in enumerate(marks) if mark < PASS_MARK]
    if len(failing) != 1:
        return None

    idx     = failing[0]
    deficit = PASS_MARK - marks[idx]
    average = float(np.mean(marks))

    if (0 < deficit <= GRACE_MAX_DEFICIT) or (average >= GRACE_MERIT_AVERAGE and deficit <= GRACE_MERIT_DEFICIT):
        return idx
    return None


def apply_grace(record, session=None):
    """
    Raise the single failing mark of a new record to the pass mark if the
    policy allows it. Irreversible; audited against the acting session.

    Returns:
        bool: True if a mark was changed.
    """
    idx = grace_eligible(record.marks)
    if idx is None:
        return False

    name, _ = record.subjects[idx]
    record.subjects[idx] = (name, PASS_MARK)
    if session is not None:
        session.audit("Applied grace")
    return True
