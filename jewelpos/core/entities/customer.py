"""Customer domain entity."""

from datetime import datetime

from pydantic import BaseModel, Field


class Customer(BaseModel):
    """A shop customer. Sales without one are walk-in sales."""

    id: str
    full_name: str
    phone: str = ""
    email: str | None = None
    address: str | None = None
    loyalty_points: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
