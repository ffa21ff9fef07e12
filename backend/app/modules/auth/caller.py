"""Явная идентичность вызывающего, передаваемая в резолверы доступа."""
from dataclasses import dataclass

from app.modules.research.enums import UserRole


@dataclass(frozen=True)
class Caller:
    id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
