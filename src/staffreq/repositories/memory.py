"""In-memory document store used by the CLI pipeline and the tests."""

from __future__ import annotations

import threading
from typing import Any, Iterable, Mapping

from ..errors import ConcurrencyConflict, ConflictError, NotFoundError
from ..schemas import Application, Approver, Candidate, Requisition, Role, Store


class MemoryDatabase:
    """Collections sharing one lock so cross-collection guards stay atomic."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.requisitions: dict[str, Requisition] = {}
        self.approvers: dict[str, Approver] = {}
        self.applications: dict[str, Application] = {}
        self.stores: dict[str, Store] = {}
        self.candidates: dict[str, Candidate] = {}
        self.counters: dict[str, int] = {}

    def load(
        self,
        *,
        approvers: Iterable[Approver] = (),
        stores: Iterable[Store] = (),
        candidates: Iterable[Candidate] = (),
        requisitions: Iterable[Requisition] = (),
    ) -> None:
        with self.lock:
            for approver in approvers:
                self.approvers[approver.user_id] = approver.model_copy(deep=True)
            for store in stores:
                self.stores[store.id] = store.model_copy(deep=True)
            for candidate in candidates:
                self.candidates[candidate.id] = candidate.model_copy(deep=True)
            for requisition in requisitions:
                self.requisitions[requisition.id] = requisition.model_copy(deep=True)

    def check_requisition(self, requisition_id: str, expected: Mapping[str, Any]) -> Requisition:
        """Verify the stored markers; caller must hold ``lock``."""
        current = self.requisitions.get(requisition_id)
        if current is None:
            raise NotFoundError("requisition not found", requisition_id=requisition_id)
        for field, value in expected.items():
            actual = getattr(current, field)
            if actual != value:
                raise ConcurrencyConflict(
                    "requisition changed since it was read",
                    expected=value,
                    actual=actual,
                    requisition_id=requisition_id,
                    field=field,
                )
        return current


class MemoryRequisitionStore:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def add(self, requisition: Requisition) -> Requisition:
        with self._db.lock:
            if requisition.id in self._db.requisitions:
                raise ConflictError("requisition already exists", requisition_id=requisition.id)
            self._db.requisitions[requisition.id] = requisition.model_copy(deep=True)
        return requisition.model_copy(deep=True)

    def get(self, requisition_id: str) -> Requisition:
        with self._db.lock:
            try:
                return self._db.requisitions[requisition_id].model_copy(deep=True)
            except KeyError as exc:
                raise NotFoundError("requisition not found", requisition_id=requisition_id) from exc

    def list(self) -> list[Requisition]:
        with self._db.lock:
            return [item.model_copy(deep=True) for item in self._db.requisitions.values()]

    def replace(self, requisition: Requisition, *, expected: Mapping[str, Any]) -> Requisition:
        with self._db.lock:
            self._db.check_requisition(requisition.id, expected)
            self._db.requisitions[requisition.id] = requisition.model_copy(deep=True)
        return requisition.model_copy(deep=True)

    def next_number(self, brand_id: str) -> int:
        with self._db.lock:
            value = self._db.counters.get(brand_id, 0) + 1
            self._db.counters[brand_id] = value
            return value


class MemoryApproverStore:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def get(self, user_id: str) -> Approver:
        with self._db.lock:
            try:
                return self._db.approvers[user_id].model_copy(deep=True)
            except KeyError as exc:
                raise NotFoundError("approver not found", user_id=user_id) from exc

    def find_active(
        self,
        role: Role,
        *,
        store_id: str | None = None,
        brand_id: str | None = None,
    ) -> Approver | None:
        with self._db.lock:
            for approver in self._db.approvers.values():
                if not approver.active or approver.role is not role:
                    continue
                if store_id is not None and not approver.covers_store(store_id):
                    continue
                if brand_id is not None and not approver.covers_brand(brand_id):
                    continue
                return approver.model_copy(deep=True)
        return None


class MemoryApplicationStore:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def create(
        self,
        application: Application,
        *,
        requisition_expected: Mapping[str, Any],
    ) -> Application:
        with self._db.lock:
            self._db.check_requisition(application.requisition_id, requisition_expected)
            if self._find_locked(application.candidate_id, application.requisition_id):
                raise ConflictError(
                    "candidate already applied to this requisition",
                    candidate_id=application.candidate_id,
                    requisition_id=application.requisition_id,
                )
            if application.id in self._db.applications:
                raise ConflictError("application already exists", application_id=application.id)
            self._db.applications[application.id] = application.model_copy(deep=True)
        return application.model_copy(deep=True)

    def get(self, application_id: str) -> Application:
        with self._db.lock:
            try:
                return self._db.applications[application_id].model_copy(deep=True)
            except KeyError as exc:
                raise NotFoundError("application not found", application_id=application_id) from exc

    def find(self, candidate_id: str, requisition_id: str) -> Application | None:
        with self._db.lock:
            found = self._find_locked(candidate_id, requisition_id)
            return found.model_copy(deep=True) if found else None

    def list_for_requisition(self, requisition_id: str) -> list[Application]:
        with self._db.lock:
            return [
                item.model_copy(deep=True)
                for item in self._db.applications.values()
                if item.requisition_id == requisition_id
            ]

    def _find_locked(self, candidate_id: str, requisition_id: str) -> Application | None:
        for item in self._db.applications.values():
            if item.candidate_id == candidate_id and item.requisition_id == requisition_id:
                return item
        return None


class MemoryStoreDirectory:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def get(self, store_id: str) -> Store:
        with self._db.lock:
            try:
                return self._db.stores[store_id].model_copy(deep=True)
            except KeyError as exc:
                raise NotFoundError("store not found", store_id=store_id) from exc


class MemoryCandidateStore:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def get(self, candidate_id: str) -> Candidate:
        with self._db.lock:
            try:
                return self._db.candidates[candidate_id].model_copy(deep=True)
            except KeyError as exc:
                raise NotFoundError("candidate not found", candidate_id=candidate_id) from exc
