"""Signed-in user as returned by the identity provider."""

from datetime import datetime

from studio_core.models.base import CamelModel


class User(CamelModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or self.email or "User"

    @property
    def initial(self) -> str:
        return (self.first_name or self.email or "U")[0].upper()
