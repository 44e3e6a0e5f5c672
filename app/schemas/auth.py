from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class Role(BaseModel):
    """Normalized role value. Built from whatever shape a role arrives in."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    name: str

    @classmethod
    def normalize(cls, raw: Any) -> "Role":
        if isinstance(raw, Role):
            return raw
        if isinstance(raw, str):
            return cls(name=raw.strip().lower())
        if isinstance(raw, dict):
            return cls(id=raw.get("id"), name=str(raw["name"]).strip().lower())
        # ORM row or anything else exposing id/name
        return cls(id=getattr(raw, "id", None), name=str(raw.name).strip().lower())


class AuthContext(BaseModel):
    """Identity of the caller, passed explicitly into every booking operation."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role.name == "admin"
