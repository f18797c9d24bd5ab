from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import Role


class Approver(BaseModel):
    """Staff member as published by the access-control subsystem."""

    user_id: str
    display_name: str | None = None
    role: Role
    active: bool = True
    vacation_mode: bool = False
    vacation_start: datetime | None = None
    vacation_end: datetime | None = None
    backup_user_id: str | None = None
    backup_display_name: str | None = None
    assigned_store_ids: list[str] = Field(default_factory=list)
    assigned_brand_ids: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    def covers_store(self, store_id: str) -> bool:
        return store_id in self.assigned_store_ids

    def covers_brand(self, brand_id: str) -> bool:
        return brand_id in self.assigned_brand_ids
