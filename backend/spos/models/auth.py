from __future__ import annotations

from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class User:
    """
    Operator account. Email is the login key.

    The password is kept as entered; to_dict() is the stored shape and
    to_public_dict() is what leaves the service layer.
    """
    id: int
    name: str
    email: str
    password: str
    created_at: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            email=data["email"],
            password=data.get("password", ""),
            created_at=data.get("created_at"),
        )
