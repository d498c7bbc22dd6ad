"""
Service metadata constants
"""

SERVICE_NAME = "attendance-tracker-backend"
DEFAULT_VERSION = "1.0.0"
