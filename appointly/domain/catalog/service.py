"""Catalog services - Business logic for categories and bookable services"""

import logging

from sqlalchemy.orm import Session

from ...exceptions import BusinessRuleError, ConflictError, NotFoundError
from ...models import Category, Service
from ..identity.repository import UserRepository
from . import rules
from .repository import CategoryRepository, ServiceRepository
from .schemas import CategoryUpdate, ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    """Service layer for category business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CategoryRepository()

    def create(self, name: str) -> Category:
        logger.info(f"📥 Creating category: {name}")

        if self.repo.get_category_by_name(self.db, name):
            raise ConflictError(f"Category '{name}' already exists.")

        category = self.repo.create_category(self.db, name)
        logger.info(f"✅ Category created: {category.id}")
        return category

    def get(self, category_id: str) -> tuple[Category, int]:
        """A category with the number of services it holds"""
        category = self._get_or_raise(category_id)
        return category, self.repo.count_services(self.db, category_id)

    def list_categories(self) -> list[tuple[Category, int]]:
        counts = self.repo.service_counts(self.db)
        return [(c, counts.get(c.id, 0)) for c in self.repo.get_categories(self.db)]

    def update(self, category_id: str, data: CategoryUpdate) -> Category:
        category = self._get_or_raise(category_id)

        existing = self.repo.get_category_by_name(self.db, data.name)
        if existing and existing.id != category.id:
            raise ConflictError(f"Category '{data.name}' already exists.")

        category = self.repo.update_category(
            self.db, category, name=data.name, is_active=data.isActive
        )
        logger.info(f"✅ Category updated: {category.id}")
        return category

    def deactivate(self, category_id: str) -> Category:
        category = self._get_or_raise(category_id)

        active_services = self.repo.count_services(self.db, category_id)
        if active_services:
            raise BusinessRuleError(
                f"Category still has {active_services} active service(s) and cannot be deactivated."
            )

        category = self.repo.update_category(self.db, category, is_active=False)
        logger.info(f"Category deactivated: {category.id}")
        return category

    def _get_or_raise(self, category_id: str) -> Category:
        category = self.repo.get_category_by_id(self.db, category_id)
        if not category:
            raise NotFoundError("Category", category_id)
        return category


class CatalogService:
    """Service layer for bookable services"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def create(self, data: ServiceCreate) -> Service:
        logger.info(f"📥 Creating service '{data.name}' for staff: {data.staffId}")

        if not CategoryRepository.get_category_by_id(self.db, data.categoryId):
            raise NotFoundError("Category", data.categoryId)

        staff = UserRepository.get_user_by_id(self.db, data.staffId)
        if not rules.can_be_assigned_to_staff(staff):
            raise BusinessRuleError("Services can only be assigned to an active staff member.")

        if self.repo.exists_for_staff(self.db, data.staffId, data.name):
            raise ConflictError("Service with the same name already exists for this staff.")

        self._check_rules(data.name, data.price, data.duration)

        service = self.repo.create_service(
            self.db,
            name=data.name,
            description=data.description,
            price=data.price,
            duration=data.duration,
            staff_id=data.staffId,
            category_id=data.categoryId,
        )
        logger.info(f"✅ Service created: {service.id}")
        return service

    def update(self, service_id: str, data: ServiceUpdate) -> Service:
        service = self.get(service_id)

        self._check_rules(data.name, data.price, data.duration)

        if self.repo.exists_for_staff(self.db, service.staff_id, data.name, exclude_id=service.id):
            raise ConflictError("Service with the same name already exists for this staff.")

        service = self.repo.update_service(
            self.db,
            service,
            name=data.name,
            description=data.description,
            price=data.price,
            duration=data.duration,
        )
        logger.info(f"✅ Service updated: {service.id}")
        return service

    def delete(self, service_id: str) -> None:
        """Soft delete; bookings keep pointing at the row"""
        service = self.get(service_id)

        if self.repo.has_open_bookings(self.db, service_id):
            raise BusinessRuleError("Service has active bookings and cannot be deleted.")

        self.repo.update_service(self.db, service, is_deleted=True)
        logger.info(f"🗑️ Service deleted: {service_id}")

    def get(self, service_id: str) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service", service_id)
        return service

    def list_services(self) -> list[Service]:
        return self.repo.get_services(self.db)

    @staticmethod
    def _check_rules(name: str, price, duration: int) -> None:
        message = rules.broken_rule(name, price, duration)
        if message:
            raise BusinessRuleError(message)
