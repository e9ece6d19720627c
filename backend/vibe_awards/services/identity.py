"""Acting-identity resolution for engagement operations.

A verified user acts as ``user:<id>``; anyone else acts as ``ip:<address>``.
A signed-in user and an anonymous visitor on the same address are therefore
different actors, while anonymous visitors sharing an address (NAT, proxies)
collapse into one actor. That collision is the accepted price of deterring
anonymous ballot stuffing.
"""

from dataclasses import dataclass
from typing import Optional

from vibe_awards.core.exceptions import IdentityUnavailableError

USER_PREFIX = "user:"
IP_PREFIX = "ip:"


@dataclass(frozen=True)
class ActingIdentity:
    """Who performs an engagement action."""

    key: str
    user_id: Optional[int] = None
    ip_address: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def row_fields(self) -> dict:
        """Columns recorded next to the actor key on association rows."""
        return {"user_id": self.user_id, "ip_address": self.ip_address}


def resolve_identity(user_id: Optional[int], client_ip: Optional[str]) -> ActingIdentity:
    """Derive the acting identity from a verified user id and client address.

    Raises:
        IdentityUnavailableError: neither input is available
    """
    if user_id is not None:
        return ActingIdentity(key=f"{USER_PREFIX}{user_id}", user_id=user_id, ip_address=client_ip)
    if client_ip:
        return ActingIdentity(key=f"{IP_PREFIX}{client_ip}", ip_address=client_ip)
    raise IdentityUnavailableError()
