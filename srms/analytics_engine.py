"""
Cohort analytics over the student store.

Hard subjects are found by aggregating every (subject, mark) pair across
all records; graduation forecasts are advisory and never touch the record.
"""
import numpy as np
import pandas as pd

from srms.config import PASS_MARK, HARD_FAIL_PCT, HARD_AVG, PROGRAM_SEMESTERS, CLEAR_PER_SEM
from srms.grade_engine import compute_cgpa, count_backlogs

ON_TRACK      = "on track"
IN_TIME       = "can graduate in time"
NOT_IN_TIME   = "may not graduate in time"

COHORT_COLUMNS = ["Roll", "Name", "Branch", "Sem", "Bkls", "CGPA"]


# ══════════════════════════════════════════════════════════════════════════════
# HARD SUBJECT DETECTION
# ══════════════════════════════════════════════════════════════════════════════
def subject_statistics(records):
    """
    Aggregate marks per subject name (exact match, no trimming or case folding).

    Args:
        records (iterable): StudentRecord objects.

    Returns:
        pd.DataFrame: one row per subject in first-seen order, with columns
        subject, count, avg, fail_pct.
    """
    rows = [(name, mark) for record in records for name, mark in record.subjects]
    if not rows:
        return pd.DataFrame(columns=['subject', 'count', 'avg', 'fail_pct'])

    df           = pd.DataFrame(rows, columns=['subject', 'mark'])
    df['failed'] = df['mark'] < PASS_MARK

    # sort=False keeps groups in order of first appearance
    stats = df.groupby('subject', sort=False).agg(
        count=('mark', 'size'),
        total=('mark', 'sum'),
        fails=('failed', 'sum'),
    ).reset_index()

    stats['avg']      = stats['total'] / stats['count']
    stats['fail_pct'] = stats['fails'] * 100.0 / stats['count']
    return stats[['subject', 'count', 'avg', 'fail_pct']]


def detect_hard_subjects(records):
    """
    Subjects whose fail rate exceeds HARD_FAIL_PCT and whose average is
    below HARD_AVG, in first-seen order.

    Returns:
        list: dicts with subject, count, avg and fail_pct.
    """
    stats = subject_statistics(records)
    if stats.empty:
        return []
    hard = stats[(stats['fail_pct'] > HARD_FAIL_PCT) & (stats['avg'] < HARD_AVG)]
    return [
        {
            'subject'  : row['subject'],
            'count'    : int(row['count']),
            'avg'      : round(float(row['avg']), 2),
            'fail_pct' : round(float(row['fail_pct']), 2),
        }
        for row in hard.to_dict('records')
    ]


# ══════════════════════════════════════════════════════════════════════════════
# GRADUATION FORECAST
# ══════════════════════════════════════════════════════════════════════════════
def estimate_graduation(record):
    """
    Forecast whether the student can clear their backlogs before the end of
    the program at CLEAR_PER_SEM backlogs per semester.

    Returns:
        dict: backlogs, clear_per_sem, needed_semesters, remaining_semesters, verdict.
    """
    backlogs  = count_backlogs(record)
    needed    = int(np.ceil(backlogs / CLEAR_PER_SEM))
    remaining = PROGRAM_SEMESTERS - record.semester + 1

    if backlogs == 0:
        verdict = ON_TRACK
    elif needed <= remaining:
        verdict = IN_TIME
    else:
        verdict = NOT_IN_TIME

    return {
        'backlogs'            : backlogs,
        'clear_per_sem'       : CLEAR_PER_SEM,
        'needed_semesters'    : needed,
        'remaining_semesters' : remaining,
        'verdict'             : verdict,
    }


# ══════════════════════════════════════════════════════════════════════════════
# COHORT LISTING
# ══════════════════════════════════════════════════════════════════════════════
def cohort_table(records, with_names=True):
    """One row per student in store order; names replaced by HIDDEN for guests."""
    rows = [
        [
            record.roll,
            record.name if with_names else "HIDDEN",
            record.branch,
            record.semester,
            count_backlogs(record),
            compute_cgpa(record),
        ]
        for record in records
    ]
    return pd.DataFrame(rows, columns=COHORT_COLUMNS)
