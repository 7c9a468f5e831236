"""Services a provider offers, and their prices."""

from datetime import datetime

from sqlalchemy.orm import Session

from scheduling_backend.core.errors import ValidationError
from scheduling_backend.database import storage_guard
from scheduling_backend.models.provider import Provider
from scheduling_backend.models.service import Service
from scheduling_backend.services.accounts import get_by_id


def list_provider_services(db: Session, provider_id: str) -> list[dict]:
    provider = get_by_id(db, Provider, provider_id, 'provider')
    return [
        {'index': index, 'service': service}
        for index, service in enumerate(provider.services or [])
    ]


def add_provider_services(db: Session, provider_id: str, services: list[str]) -> list[str]:
    """Append services the provider does not offer yet, keeping order."""
    provider = get_by_id(db, Provider, provider_id, 'provider')
    merged = list(provider.services or [])
    for service in services:
        service = service.strip()
        if service and service not in merged:
            merged.append(service)

    with storage_guard(db, 'update provider services'):
        provider.services = merged
        provider.updated_at = datetime.now()
        db.commit()
        db.refresh(provider)

    return provider.services


def remove_provider_service(db: Session, provider_id: str, index: int) -> list[str]:
    provider = get_by_id(db, Provider, provider_id, 'provider')
    services = list(provider.services or [])
    if index < 0 or index >= len(services):
        raise ValidationError('Index out of range.')

    del services[index]
    with storage_guard(db, 'update provider services'):
        provider.services = services
        provider.updated_at = datetime.now()
        db.commit()
        db.refresh(provider)

    return provider.services


def set_price(db: Session, provider_id: str, service_name: str, price: int) -> Service:
    service_name = service_name.strip()
    if not service_name:
        raise ValidationError('Service name is required.')
    if price < 0:
        raise ValidationError('Price cannot be negative.')

    with storage_guard(db, 'set price'):
        service = db.query(Service).filter(
            Service.provider_id == provider_id,
            Service.service_name == service_name,
        ).first()
        if service is None:
            service = Service(provider_id=provider_id, service_name=service_name, price=price)
            db.add(service)
        else:
            service.price = price
        db.commit()
        db.refresh(service)

    return service


def list_prices(db: Session, provider_id: str | None = None) -> list[Service]:
    with storage_guard(db, 'list prices'):
        query = db.query(Service)
        if provider_id:
            query = query.filter(Service.provider_id == provider_id)
        return query.order_by(Service.service_name.asc(), Service.price.asc()).all()
