"""
Configuration for the student record system.

Policy constants are fixed. File locations and the diagnostic log level
can be overridden from the environment (or a local .env file).
"""
import os

from dotenv import load_dotenv

load_dotenv()

# ══════════════════════════════════════════════════════════════════════════════
# FILE LOCATIONS
# ══════════════════════════════════════════════════════════════════════════════
STUDENT_FILE    = os.getenv("SRMS_STUDENT_FILE", "student.txt")
CREDENTIAL_FILE = os.getenv("SRMS_CREDENTIAL_FILE", "credential.txt")
LOG_FILE        = os.getenv("SRMS_LOG_FILE", "logs.txt")
BACKUP_DIR      = os.getenv("SRMS_BACKUP_DIR", ".")
REPORT_DIR      = os.getenv("SRMS_REPORT_DIR", ".")

LOG_LEVEL       = os.getenv("SRMS_LOG_LEVEL", "WARNING").upper()

# ══════════════════════════════════════════════════════════════════════════════
# CAPACITY LIMITS
# ══════════════════════════════════════════════════════════════════════════════
MAX_USERS       = 50        # Accounts in the credential store
MAX_STUDENTS    = 200       # Records in the student store
MAX_SUBJECTS    = 10        # Subjects per student record

# Legacy field widths of the credential file
USERNAME_LEN    = 49
PASSWORD_LEN    = 49
ROLE_LEN        = 11

# ══════════════════════════════════════════════════════════════════════════════
# GRADING POLICY
# ══════════════════════════════════════════════════════════════════════════════
PASS_MARK           = 40.0  # Marks below this are a backlog
GRACE_MAX_DEFICIT   = 5.0   # Grace given if the single fail is this close
GRACE_MERIT_AVERAGE = 75.0  # ...or if the average is at least this
GRACE_MERIT_DEFICIT = 3.0   # ...and the fail is this close

HARD_FAIL_PCT       = 30.0  # Hard subject: fail % strictly above this
HARD_AVG            = 40.0  # ...and average strictly below this

PROGRAM_SEMESTERS   = 8     # Fixed program length
CLEAR_PER_SEM       = 2     # Assumed backlog clearance rate

# ══════════════════════════════════════════════════════════════════════════════
# ACCOUNTS & SESSION
# ══════════════════════════════════════════════════════════════════════════════
ROLES               = ("admin", "teacher", "student", "guest")
NEVER_LOGGED_IN     = "-"
FIRST_LOGIN         = "FIRST"
DEFAULT_ADMIN       = ("admin", "admin", "admin")
MAX_LOGIN_ATTEMPTS  = 3

TIMESTAMP_FORMAT    = "%Y%m%d%H%M"
