# supportdesk/models/agent.py
import uuid as uuid_pkg
from typing import Optional

from sqlmodel import Field, SQLModel

from ..core.constants import AGENT_EMAIL_MAX_LENGTH, AGENT_NAME_MAX_LENGTH


class Agent(SQLModel, table=True):
    """A support staff member tickets can be assigned to."""

    __tablename__ = "agents"

    id: uuid_pkg.UUID = Field(default_factory=uuid_pkg.uuid4, primary_key=True)
    name: str = Field(nullable=False, max_length=AGENT_NAME_MAX_LENGTH)
    email: Optional[str] = Field(default=None, max_length=AGENT_EMAIL_MAX_LENGTH)
