# maintdesk/models.py
from enum import Enum
from typing import Optional
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class RequestType(str, Enum):
    CORRECTIVE = "corrective"
    PREVENTIVE = "preventive"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RequestStatus(str, Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class StoreRow(BaseModel):
    # rows come straight from the store; tolerate columns we don't model
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EquipmentCategory(StoreRow):
    id: str
    name: str
    created_at: Optional[datetime] = None


class MaintenanceTeam(StoreRow):
    id: str
    name: str
    created_at: Optional[datetime] = None


class Equipment(StoreRow):
    id: str
    name: str
    category_id: Optional[str] = None
    team_id: Optional[str] = None
    created_at: Optional[datetime] = None
    # embedded relations keep the store's relation names on the wire
    category: Optional[EquipmentCategory] = Field(default=None, alias="equipment_categories")
    team: Optional[MaintenanceTeam] = Field(default=None, alias="maintenance_teams")


class MaintenanceRequest(StoreRow):
    id: str
    title: str
    equipment_id: Optional[str] = None
    request_type: str
    scheduled_date: date
    # priority and status stay plain strings so unknown values still load
    priority: str
    description: str = ""
    attachment_url: Optional[str] = None
    status: str = RequestStatus.NEW.value
    created_at: datetime
    equipment: Optional[Equipment] = None


class NewMaintenanceRequest(BaseModel):
    """JSON body accepted by POST /api/requests."""
    title: str = ""
    equipment_id: str = ""
    request_type: str = RequestType.CORRECTIVE.value
    scheduled_date: str = ""
    priority: str = Priority.MEDIUM.value
    description: str = ""
    attachment_url: Optional[str] = ""
