"""Student record & grading system: flat-file records, grade policy, cohort analytics."""

__version__ = "1.0.0"
