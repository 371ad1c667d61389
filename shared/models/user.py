from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from shared.constants import ADMIN_ROLES, Role


class CurrentUser(BaseModel):
    """User context from JWT; identity itself lives with the identity provider."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str
    name: str | None = None
    roles: list[Role] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return any(r in ADMIN_ROLES for r in self.roles)

    @property
    def display_name(self) -> str:
        """Full name when the token carries one, else the e-mail local part."""
        if self.name:
            return self.name
        if self.email:
            return self.email.split("@")[0]
        return "Usuário"
