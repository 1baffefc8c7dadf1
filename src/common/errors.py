"""
Exception hierarchy for the job dashboard.

Cursor errors are recovered inside the query planner (pagination restarts).
Everything else propagates to the HTTP layer, which maps it to a status code.
"""


class JobDashboardError(Exception):
    """Base exception for job dashboard errors."""
    pass


class CursorError(JobDashboardError):
    """Base exception for pagination cursor problems."""
    pass


class MalformedCursor(CursorError):
    """Raised when a cursor token cannot be decoded into a cursor."""
    pass


class SortMismatch(CursorError):
    """Raised when a cursor was minted under a different sort order."""

    def __init__(self, cursor_sort: str, requested_sort: str):
        self.cursor_sort = cursor_sort
        self.requested_sort = requested_sort
        super().__init__(
            f"Cursor minted for sort '{cursor_sort}' cannot continue sort '{requested_sort}'"
        )


class InvalidArgument(JobDashboardError):
    """Raised when a request parameter is outside its allowed values."""
    pass


class StoreUnavailable(JobDashboardError):
    """Raised when the document store cannot serve a query."""
    pass


class JobNotFound(JobDashboardError):
    """Raised when a point update targets a job that does not exist."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")
