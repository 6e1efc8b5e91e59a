"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.agency_repository import IAgencyRepository
from domain.repositories.invite_repository import IInviteRepository
from domain.repositories.membership_repository import IMembershipRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.submission_repository import ISubmissionRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions.

    Everything written between entering the context and ``commit`` becomes
    visible together or not at all.
    """

    agencies: IAgencyRepository
    memberships: IMembershipRepository
    invites: IInviteRepository
    submissions: ISubmissionRepository
    profiles: IProfileRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
