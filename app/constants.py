"""
Constants for roles, settings keys and attendance rules
"""

# Role constants
ROLE_EMPLOYEE = "employee"
ROLE_MANAGER = "manager"
ROLE_ADMIN = "admin"

# Roles that may review and edit other users' attendance
PRIVILEGED_ROLES = (ROLE_MANAGER, ROLE_ADMIN)

# Settings keys
SETTING_LATE_THRESHOLD = "late_threshold"

# Profile provisioning
EMPLOYEE_CODE_PREFIX = "EMP"
EMPLOYEE_CODE_WIDTH = 4
DEFAULT_PROFILE_NAME = "New User"
DEFAULT_DEPARTMENT = "General"

# Audit override reason bounds (after trimming)
OVERRIDE_REASON_MIN_LENGTH = 3
OVERRIDE_REASON_MAX_LENGTH = 500

# Team attendance listing
TEAM_ATTENDANCE_DEFAULT_LIMIT = 100
