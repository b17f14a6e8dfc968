from dataclasses import dataclass
from typing import Optional

from fastapi import Header


@dataclass(frozen=True)
class Actor:
    """
    Opaque identity of whoever triggered a write. Used for audit columns and logs only.
    """
    actor_id: Optional[str] = None
    actor_name: Optional[str] = None

    def __str__(self) -> str:
        return self.actor_name or self.actor_id or "anonymous"


async def get_actor(
    x_actor_id: Optional[str] = Header(default=None),
    x_actor_name: Optional[str] = Header(default=None),
) -> Actor:
    """
    Dependency reading the actor from `X-Actor-Id` / `X-Actor-Name` headers.
    """
    actor_id = x_actor_id.strip() if x_actor_id and x_actor_id.strip() else None
    actor_name = x_actor_name.strip() if x_actor_name and x_actor_name.strip() else None
    return Actor(actor_id=actor_id, actor_name=actor_name)
