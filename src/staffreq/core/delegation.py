"""Vacation-based substitution of approvers."""

from __future__ import annotations

from typing import Any, Callable

import pendulum
import structlog

from ..errors import NotFoundError
from ..schemas import Approver
from ..repositories import ApproverStore


class DelegationResolver:
    """Pick the effective approver: the record itself or its active backup.

    Resolution runs once, when an approver is assigned to a chain step. A
    vacation starting after assignment does not move the step.
    """

    def __init__(
        self,
        approvers: ApproverStore,
        *,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._approvers = approvers
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def resolve(self, approver: Approver) -> Approver:
        if not self._on_vacation(approver) or not approver.backup_user_id:
            return approver

        try:
            backup = self._approvers.get(approver.backup_user_id)
        except NotFoundError:
            self._logger.warning(
                "delegation.backup_missing",
                user_id=approver.user_id,
                backup_user_id=approver.backup_user_id,
            )
            return approver

        if not backup.active:
            self._logger.warning(
                "delegation.backup_inactive",
                user_id=approver.user_id,
                backup_user_id=backup.user_id,
            )
            return approver

        self._logger.info(
            "delegation.resolved",
            user_id=approver.user_id,
            backup_user_id=backup.user_id,
        )
        return backup

    def _on_vacation(self, approver: Approver) -> bool:
        if not approver.vacation_mode:
            return False
        if approver.vacation_start is None and approver.vacation_end is None:
            return True
        now = pendulum.instance(self._now_provider())
        if approver.vacation_start is not None and now < pendulum.instance(approver.vacation_start):
            return False
        if approver.vacation_end is not None and now > pendulum.instance(approver.vacation_end):
            return False
        return True

