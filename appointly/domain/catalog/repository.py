"""Catalog repository - Database operations for categories and services"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Booking, BookingStatus, Category, Service


class CategoryRepository:
    """Repository for category database operations"""

    @staticmethod
    def get_category_by_id(db: Session, category_id: str) -> Optional[Category]:
        return db.query(Category).filter(Category.id == category_id).first()

    @staticmethod
    def get_category_by_name(db: Session, name: str) -> Optional[Category]:
        """Case-insensitive lookup used for the uniqueness check"""
        return db.query(Category).filter(func.lower(Category.name) == name.lower()).first()

    @staticmethod
    def get_categories(db: Session) -> list[Category]:
        return db.query(Category).order_by(Category.name.asc()).all()

    @staticmethod
    def service_counts(db: Session) -> dict[str, int]:
        """Number of non-deleted services per category id"""
        rows = (
            db.query(Service.category_id, func.count(Service.id))
            .filter(Service.is_deleted.is_(False))
            .group_by(Service.category_id)
            .all()
        )
        return {category_id: count for category_id, count in rows}

    @staticmethod
    def count_services(db: Session, category_id: str) -> int:
        return (
            db.query(func.count(Service.id))
            .filter(Service.category_id == category_id, Service.is_deleted.is_(False))
            .scalar()
        )

    @staticmethod
    def create_category(db: Session, name: str) -> Category:
        category = Category(name=name, is_active=True)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    @staticmethod
    def update_category(db: Session, category: Category, **updates) -> Category:
        """Update a category with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(category, key):
                setattr(category, key, value)

        db.commit()
        db.refresh(category)
        return category


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_service_by_id(db: Session, service_id: str) -> Optional[Service]:
        """Get a non-deleted service by ID"""
        return (
            db.query(Service)
            .options(joinedload(Service.staff), joinedload(Service.category))
            .filter(Service.id == service_id, Service.is_deleted.is_(False))
            .first()
        )

    @staticmethod
    def get_services(db: Session) -> list[Service]:
        """All non-deleted services"""
        return (
            db.query(Service)
            .options(joinedload(Service.staff), joinedload(Service.category))
            .filter(Service.is_deleted.is_(False))
            .order_by(Service.name.asc())
            .all()
        )

    @staticmethod
    def exists_for_staff(
        db: Session, staff_id: str, name: str, exclude_id: Optional[str] = None
    ) -> bool:
        """Whether the staff member already offers a service with this name"""
        query = db.query(Service.id).filter(
            Service.staff_id == staff_id,
            func.lower(Service.name) == name.lower(),
            Service.is_deleted.is_(False),
        )
        if exclude_id:
            query = query.filter(Service.id != exclude_id)
        return db.query(query.exists()).scalar()

    @staticmethod
    def has_open_bookings(db: Session, service_id: str) -> bool:
        """Whether any Pending or Approved booking references the service"""
        query = db.query(Booking.id).filter(
            Booking.service_id == service_id,
            Booking.status.in_([BookingStatus.PENDING, BookingStatus.APPROVED]),
        )
        return db.query(query.exists()).scalar()

    @staticmethod
    def create_service(db: Session, **service_data) -> Service:
        service = Service(**service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service
