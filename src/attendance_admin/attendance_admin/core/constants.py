"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import timedelta

# The hosted store caps rows per query; every bulk read pages by this size.
DEFAULT_BATCH_SIZE = 1000
EMPLOYEE_LOOKUP_BATCH_SIZE = 100
AUDIT_EXPORT_MAX_ROWS = 50000

DEFAULT_TIMEZONE = "America/Sao_Paulo"
PROXIMITY_WINDOW = timedelta(hours=2)
MULTI_DAY_TRAILING_WINDOW = timedelta(days=1)

DEFAULT_LOGS_PER_PAGE = 15
DEFAULT_EMPLOYEES_PER_PAGE = 20
DEFAULT_LAST_ENTRIES = 5
SEARCH_RESULT_LIMIT = 20
