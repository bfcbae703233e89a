"""Service catalogue lookups."""

from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_admin
from app.models.service import Service
from app.models.user import User
from app.schemas.service import ServiceCreate, ServiceOut

router = APIRouter()


@router.get("", response_model=list[ServiceOut])
async def list_services(all: bool = False, db: AsyncSession = Depends(get_db)):
    """Active services; pass ``all=true`` to include retired ones."""
    query = select(Service).order_by(Service.category, Service.name)
    if not all:
        query = query.where(Service.is_active.is_(True))
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{service_id}", response_model=ServiceOut)
async def get_service(service_id: UUID, db: AsyncSession = Depends(get_db)):
    service = await db.get(Service, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.post("", response_model=ServiceOut, status_code=201)
async def create_service(
    body: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    service = Service(**body.model_dump())
    db.add(service)
    await db.commit()
    await db.refresh(service)
    return service
