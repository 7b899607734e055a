"""Catalog router - FastAPI endpoints for categories and services"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...auth import require_roles
from ...database import get_db
from ...models import Category, Service, User, UserRole
from ...shared.responses import ServiceResponse
from .schemas import (
    CatalogServiceResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ServiceCreate,
    ServiceUpdate,
)
from .service import CatalogService, CategoryService

logger = logging.getLogger(__name__)

categories_router = APIRouter(prefix="/api/categories", tags=["Categories"])
services_router = APIRouter(prefix="/api/services", tags=["Services"])

require_admin = require_roles(UserRole.ADMIN)
require_staff_or_admin = require_roles(UserRole.STAFF, UserRole.ADMIN)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    """Dependency injection for CategoryService"""
    return CategoryService(db)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def _category_response(category: Category, service_count: int = 0) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        isActive=category.is_active,
        serviceCount=service_count,
    )


def _service_response(service: Service) -> CatalogServiceResponse:
    return CatalogServiceResponse(
        id=service.id,
        name=service.name,
        description=service.description,
        price=service.price,
        duration=service.duration,
        staffId=service.staff_id,
        staffName=service.staff.full_name if service.staff else None,
        categoryId=service.category_id,
        categoryName=service.category.name if service.category else None,
        isDeleted=service.is_deleted,
    )


# ============================================================================
# CATEGORIES
# ============================================================================


@categories_router.get("", response_model=ServiceResponse[list[CategoryResponse]])
async def get_categories(service: CategoryService = Depends(get_category_service)):
    """Get all categories with their service counts"""
    categories = service.list_categories()
    return ServiceResponse.ok(data=[_category_response(c, count) for c, count in categories])


@categories_router.get("/{category_id}", response_model=ServiceResponse[CategoryResponse])
async def get_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
):
    category, count = service.get(category_id)
    return ServiceResponse.ok(data=_category_response(category, count))


@categories_router.post(
    "", response_model=ServiceResponse[CategoryResponse], status_code=status.HTTP_201_CREATED
)
async def create_category(
    data: CategoryCreate,
    current_user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    category = service.create(data.name)
    return ServiceResponse.ok(
        data=_category_response(category),
        message="Category created successfully.",
        id=category.id,
    )


@categories_router.put("/{category_id}", response_model=ServiceResponse[CategoryResponse])
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    current_user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    category = service.update(category_id, data)
    return ServiceResponse.ok(
        data=_category_response(category),
        message="Category updated successfully.",
        id=category.id,
    )


@categories_router.patch("/{category_id}/deactivate", response_model=ServiceResponse)
async def deactivate_category(
    category_id: str,
    current_user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    """Deactivate a category that no longer holds services"""
    service.deactivate(category_id)
    return ServiceResponse.ok(message="Category deactivated successfully.", id=category_id)


# ============================================================================
# SERVICES
# ============================================================================


@services_router.get("", response_model=ServiceResponse[list[CatalogServiceResponse]])
async def get_services(service: CatalogService = Depends(get_catalog_service)):
    """Get all bookable (non-deleted) services"""
    return ServiceResponse.ok(data=[_service_response(s) for s in service.list_services()])


@services_router.get("/{service_id}", response_model=ServiceResponse[CatalogServiceResponse])
async def get_service(
    service_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    return ServiceResponse.ok(data=_service_response(service.get(service_id)))


@services_router.post(
    "", response_model=ServiceResponse[CatalogServiceResponse], status_code=status.HTTP_201_CREATED
)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(require_staff_or_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    created = service.create(data)
    return ServiceResponse.ok(
        data=_service_response(created),
        message="Service created successfully.",
        id=created.id,
    )


@services_router.put("/{service_id}", response_model=ServiceResponse[CatalogServiceResponse])
async def update_service(
    service_id: str,
    data: ServiceUpdate,
    current_user: User = Depends(require_staff_or_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    updated = service.update(service_id, data)
    return ServiceResponse.ok(
        data=_service_response(updated),
        message="Service updated successfully.",
        id=updated.id,
    )


@services_router.delete("/{service_id}", response_model=ServiceResponse)
async def delete_service(
    service_id: str,
    current_user: User = Depends(require_staff_or_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    """Soft-delete a service"""
    service.delete(service_id)
    return ServiceResponse.ok(message="Service deleted successfully.", id=service_id)
