"""Repository contracts the core is written against."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from ..schemas import Application, Approver, Candidate, Requisition, Role, Store
from .memory import (
    MemoryApplicationStore,
    MemoryApproverStore,
    MemoryCandidateStore,
    MemoryDatabase,
    MemoryRequisitionStore,
    MemoryStoreDirectory,
)

Expected = Mapping[str, Any]


@runtime_checkable
class RequisitionStore(Protocol):
    """Requisition collection with optimistic writes.

    ``expected`` maps field names to the values the caller observed; a write
    only lands when every one of them still matches the stored document.
    """

    def add(self, requisition: Requisition) -> Requisition:
        """Insert a new requisition."""

    def get(self, requisition_id: str) -> Requisition:
        """Return the stored requisition or raise NotFoundError."""

    def list(self) -> list[Requisition]:
        """Return every stored requisition."""

    def replace(self, requisition: Requisition, *, expected: Expected) -> Requisition:
        """Compare-and-swap the whole document."""

    def next_number(self, brand_id: str) -> int:
        """Reserve the next sequential display number for a brand."""


@runtime_checkable
class ApproverStore(Protocol):
    def get(self, user_id: str) -> Approver:
        """Return the approver or raise NotFoundError."""

    def find_active(
        self,
        role: Role,
        *,
        store_id: str | None = None,
        brand_id: str | None = None,
    ) -> Approver | None:
        """Return the first active approver of ``role`` covering the store or brand."""


@runtime_checkable
class ApplicationStore(Protocol):
    def create(self, application: Application, *, requisition_expected: Expected) -> Application:
        """Insert once per candidate/requisition pair, guarded by the requisition markers."""

    def get(self, application_id: str) -> Application:
        """Return the application or raise NotFoundError."""

    def find(self, candidate_id: str, requisition_id: str) -> Application | None:
        """Return the existing application for the pair, if any."""

    def list_for_requisition(self, requisition_id: str) -> list[Application]:
        """Return applications submitted against a requisition."""


@runtime_checkable
class StoreDirectory(Protocol):
    def get(self, store_id: str) -> Store:
        """Return the store or raise NotFoundError."""


@runtime_checkable
class CandidateStore(Protocol):
    def get(self, candidate_id: str) -> Candidate:
        """Return the candidate or raise NotFoundError."""


__all__ = [
    "ApplicationStore",
    "ApproverStore",
    "CandidateStore",
    "Expected",
    "MemoryApplicationStore",
    "MemoryApproverStore",
    "MemoryCandidateStore",
    "MemoryDatabase",
    "MemoryRequisitionStore",
    "MemoryStoreDirectory",
    "RequisitionStore",
    "StoreDirectory",
]
