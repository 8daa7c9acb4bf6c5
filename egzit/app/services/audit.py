"""
Audit logging service for tracking security events, admin actions and
degraded enrichment.
"""

from typing import Optional, Dict, Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, func
from egzit.app.models.audit_log import AuditLog


class AuditAction:
    """Standardized audit action constants."""
    USER_CREATED = "USER_CREATED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"

    MOVER_CREATED = "MOVER_CREATED"

    # Route service unavailable, default duration used
    ROUTE_ESTIMATE_DEFAULTED = "ROUTE_ESTIMATE_DEFAULTED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[int] = None,
    actor_username: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLog:
    """
    Add an audit row to the current transaction.

    The row is flushed, not committed: it lands together with the change it
    describes, or not at all.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_id: ID of user performing the action
        actor_username: Username of actor
        target_type: Kind of record acted upon ("move", "mover", "user")
        target_id: ID of that record
        metadata: Additional context as JSON
        ip_address: IP address of the request
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        actor_username=actor_username,
        action=action,
        target_type=target_type,
        target_id=target_id,
        meta_data=metadata,
        ip_address=ip_address
    )

    db.add(audit_log)
    await db.flush()

    return audit_log


async def log_auth_event(
    db: AsyncSession,
    action: str,
    user_id: Optional[int],
    username: Optional[str],
    ip_address: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Log an authentication event (login success/failure, logout)."""
    return await log_event(
        db=db,
        action=action,
        actor_id=user_id,
        actor_username=username,
        target_type="user",
        target_id=user_id,
        ip_address=ip_address,
        metadata=metadata
    )


async def get_audit_trail(
    db: AsyncSession,
    action: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[int] = None,
    limit: int = 100
) -> List[AuditLog]:
    """Retrieve audit rows, most recent first."""
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if action:
        query = query.where(AuditLog.action == action)
    if target_type:
        query = query.where(AuditLog.target_type == target_type)
    if target_id:
        query = query.where(AuditLog.target_id == target_id)

    result = await db.execute(query.limit(limit))
    return list(result.scalars().all())


async def count_events(db: AsyncSession, action: str) -> int:
    result = await db.execute(select(func.count(AuditLog.id)).where(AuditLog.action == action))
    return result.scalar() or 0
