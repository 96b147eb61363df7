from uuid import UUID

from pydantic import BaseModel

from feeledger.core.enums import ProfileRole


class CurrentUser(BaseModel):
    """Authenticated requester, passed explicitly into every service call.
    id is the identity reference (profiles.user_id); role comes from the stored profile.
    """

    id: UUID
    role: str
    email: str

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN
