"""
Services operating on the jobs collection.
"""

from src.services.job_actions_service import ActionResult, JobActionsService, parse_job_id

__all__ = [
    "ActionResult",
    "JobActionsService",
    "parse_job_id",
]
