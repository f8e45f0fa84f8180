"""
Core — Shared Constants

Audit action names and pagination defaults used across apps.

@file core/constants.py
"""

AUDIT_ACTION_CREATE = 'CREATE'
AUDIT_ACTION_UPDATE = 'UPDATE'
AUDIT_ACTION_DEACTIVATE = 'DEACTIVATE'
AUDIT_ACTION_STATUS_CHANGE = 'STATUS_CHANGE'

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
