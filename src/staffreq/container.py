"""Dependency injection container for the requisition core."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import (
    ApplicationRouter,
    ApprovalChainEngine,
    DelegationResolver,
    GeoConfig,
    GeoMatchEngine,
    SlotFulfillmentTracker,
)
from .repositories import (
    MemoryApplicationStore,
    MemoryApproverStore,
    MemoryCandidateStore,
    MemoryDatabase,
    MemoryRequisitionStore,
    MemoryStoreDirectory,
)
from .pipeline import RoutingPipeline
from .service import RequisitionNumberer, RequisitionService


class StaffingContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    database = providers.Singleton(MemoryDatabase)

    requisition_store = providers.Singleton(MemoryRequisitionStore, database)
    approver_store = providers.Singleton(MemoryApproverStore, database)
    application_store = providers.Singleton(MemoryApplicationStore, database)
    candidate_store = providers.Singleton(MemoryCandidateStore, database)
    store_directory = providers.Singleton(MemoryStoreDirectory, database)

    geo_engine = providers.Singleton(GeoMatchEngine)
    delegation_resolver = providers.Singleton(DelegationResolver, approver_store)

    approval_engine = providers.Singleton(
        ApprovalChainEngine,
        approvers=approver_store,
        requisitions=requisition_store,
        resolver=delegation_resolver,
    )
    fulfillment_tracker = providers.Singleton(
        SlotFulfillmentTracker,
        requisitions=requisition_store,
    )
    application_router = providers.Singleton(
        ApplicationRouter,
        geo=geo_engine,
        applications=application_store,
    )

    numberer = providers.Singleton(
        RequisitionNumberer,
        brand_codes=config.brand_codes,
    )

    service = providers.Singleton(
        RequisitionService,
        requisitions=requisition_store,
        applications=application_store,
        candidates=candidate_store,
        stores=store_directory,
        approval=approval_engine,
        router=application_router,
        tracker=fulfillment_tracker,
        geo=geo_engine,
        numberer=numberer,
    )

    pipeline = providers.Factory(
        RoutingPipeline,
        service=service,
        database=database,
    )


def create_container(*, settings: dict | None = None) -> StaffingContainer:
    """Instantiate container with optional overrides."""

    container = StaffingContainer()

    if not settings:
        return container

    numbering_settings = settings.get("numbering", {}) if isinstance(settings, dict) else {}
    if numbering_settings:
        container.config.override(numbering_settings)

    geo_settings = settings.get("geo", {}) if isinstance(settings, dict) else {}
    if geo_settings:
        geo_config = GeoConfig(**geo_settings)
        container.geo_engine.override(providers.Singleton(GeoMatchEngine, config=geo_config))

    return container
