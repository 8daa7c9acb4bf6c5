"""
Admin Mover Directory API Endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from egzit.app.db.session import get_db
from egzit.app.models.enums import UserRole
from egzit.app.models.mover import Mover
from egzit.app.core.guards import require_role
from egzit.app.schemas.mover import MoverCreate, MoverResponse
from egzit.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/admin/movers", tags=["Admin - Movers"])


@router.post("", response_model=MoverResponse, status_code=status.HTTP_201_CREATED)
async def create_mover(
    mover_data: MoverCreate,
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """Add a moving company to the directory."""
    mover = Mover(**mover_data.model_dump())
    db.add(mover)
    await db.flush()

    await log_event(
        db=db,
        action=AuditAction.MOVER_CREATED,
        actor_id=current_user["user_id"],
        actor_username=current_user.get("sub"),
        target_type="mover",
        target_id=mover.id,
        metadata={"name": mover.name, "vehicle_class": mover.vehicle_class.value}
    )
    await db.commit()
    await db.refresh(mover)

    return MoverResponse.model_validate(mover)


@router.get("", response_model=List[MoverResponse])
async def list_movers(
    available: Optional[bool] = Query(None, description="Filter by availability"),
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    query = select(Mover)
    if available is not None:
        query = query.where(Mover.available == available)
    result = await db.execute(query.order_by(Mover.name))
    return [MoverResponse.model_validate(m) for m in result.scalars().all()]
