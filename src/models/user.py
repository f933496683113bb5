"""Session user model."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """The active session's user record."""

    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"id": self.id, "name": self.name, "email": self.email}
        if self.avatar_url:
            result["avatarUrl"] = self.avatar_url
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            email=str(data.get("email", "")),
            avatar_url=data.get("avatarUrl"),
        )
