"""Actor resolution (placeholder until authentication is wired in)."""
from typing import Optional
from fastapi import Header


def get_current_actor(
    x_actor_id: Optional[str] = Header(None, description="Acting user identifier")
) -> str:
    """
    Get the identifier of the user performing a write.

    Token verification and role checks live outside this service, so the
    upstream gateway forwards the resolved user in ``X-Actor-Id``.
    """
    return x_actor_id or "system"
