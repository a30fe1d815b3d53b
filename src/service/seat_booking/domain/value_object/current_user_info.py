from uuid import UUID

import attrs


@attrs.define(frozen=True)
class CurrentUserInfo:
    """Authenticated identity of the client session"""

    user_id: UUID
    email: str | None = None
