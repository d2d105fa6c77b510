from careers.services.accounts import AccountService
from careers.services.applications import ApplicationSubmissionService
from careers.services.jobs import JobStore
from careers.services.snapshot import ProfileSnapshot, build_profile_snapshot

__all__ = [
    "AccountService",
    "ApplicationSubmissionService",
    "JobStore",
    "ProfileSnapshot",
    "build_profile_snapshot",
]
