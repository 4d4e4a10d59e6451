"""Gmail label model."""

from typing import Optional

from pydantic import BaseModel


class Label(BaseModel):
    """Gmail label as returned by users.labels.list."""

    id: str
    name: str
    type: Optional[str] = None  # "system" or "user"
