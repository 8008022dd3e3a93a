from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import discord

# Two weeks in seconds divided by 14: invites live for one day.
INVITE_MAX_AGE = 1209600 // 14
INVITE_MAX_USES = 50
INVITE_REASON = "Scheduled event announcement"

LOGGER = logging.getLogger(__name__)


class InviteError(Exception):
    pass


class ChannelResolutionError(InviteError):
    pass


class InviteCreationError(InviteError):
    pass


@dataclass(frozen=True)
class ScheduledEventRef:
    event_id: int
    guild_id: int
    channel_id: Optional[int] = None

    @classmethod
    def from_event(cls, event: Any) -> "ScheduledEventRef":
        channel_id = getattr(event, "channel_id", None)
        return cls(
            event_id=int(event.id),
            guild_id=int(event.guild_id),
            channel_id=int(channel_id) if channel_id is not None else None,
        )


@dataclass(frozen=True)
class InviteGrant:
    channel_id: int
    max_age: int
    max_uses: int
    url: str


def event_invite_url(invite_url: str, event_id: int) -> str:
    return f"{invite_url}?event={event_id}"


class InviteResolver:
    def __init__(
        self, max_age: int = INVITE_MAX_AGE, max_uses: int = INVITE_MAX_USES
    ):
        if max_age <= 0:
            raise ValueError("Invite max_age must be positive")
        self.max_age = max_age
        self.max_uses = max_uses

    async def create_grant(self, channel: Any, event_id: int) -> InviteGrant:
        if channel is None:
            raise ChannelResolutionError(
                "Error creating invite, could not access channel!"
            )
        create_invite = getattr(channel, "create_invite", None)
        if create_invite is None:
            raise ChannelResolutionError(
                f"Channel {getattr(channel, 'id', channel)} does not support invites"
            )
        try:
            invite = await create_invite(
                max_age=self.max_age,
                max_uses=self.max_uses,
                reason=INVITE_REASON,
            )
        except discord.HTTPException as exc:
            LOGGER.error("Failed creating invite in channel %s: %s", channel.id, exc)
            raise InviteCreationError(f"Error creating invite: {exc}") from exc
        grant = InviteGrant(
            channel_id=channel.id,
            max_age=self.max_age,
            max_uses=self.max_uses,
            url=event_invite_url(invite.url, event_id),
        )
        LOGGER.info("Created invite for event %s: %s", event_id, grant.url)
        return grant

    async def resolve(self, channel: Any, event_id: int) -> str:
        grant = await self.create_grant(channel, event_id)
        return grant.url
