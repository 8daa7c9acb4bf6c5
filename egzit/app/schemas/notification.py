"""
Notification Schemas.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, Dict, Any
from egzit.app.models.notification import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: NotificationType
    title: str
    message: str
    metadata_payload: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: datetime
    read_at: Optional[datetime] = None
