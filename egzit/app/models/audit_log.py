"""
Audit Log Database Model.

Tracks security events, admin actions and degraded enrichment for monitoring.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from egzit.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking security events and admin actions.

    Events logged:
    - LOGIN_SUCCESS / LOGIN_FAILED / LOGOUT
    - USER_CREATED
    - MOVER_CREATED
    - ROUTE_ESTIMATE_DEFAULTED (route service unavailable, default duration used)
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for system actions)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_username = Column(String(100), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # What the action was about
    target_type = Column(String(50), nullable=True)
    target_id = Column(Integer, index=True, nullable=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # IP address for login tracking
    ip_address = Column(String(50), nullable=True)

    # Timestamp
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_username}, target={self.target_type}:{self.target_id})>"
