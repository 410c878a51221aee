"""Request payloads of the roles module."""
from pydantic import BaseModel

from models import RoleName


class RoleChangePayload(BaseModel):
    userId: int
    roleName: RoleName
