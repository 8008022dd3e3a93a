from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import discord

from .invites import InviteError, InviteResolver, ScheduledEventRef

ANNOUNCEMENT_TEMPLATE = "Event Posted! {url}"

LOGGER = logging.getLogger(__name__)


class AnnouncementStatus(enum.Enum):
    POSTED = "posted"
    CHANNEL_UNRESOLVED = "channel_unresolved"
    INVITE_FAILED = "invite_failed"
    SEND_FAILED = "send_failed"


@dataclass(frozen=True)
class AnnouncementResult:
    status: AnnouncementStatus
    event: Optional[ScheduledEventRef] = None
    url: Optional[str] = None
    error: Optional[str] = None

    @property
    def posted(self) -> bool:
        return self.status is AnnouncementStatus.POSTED


class EventAnnouncer:
    def __init__(
        self,
        channel_id: int,
        get_channel: Callable[[int], Any],
        resolver: InviteResolver | None = None,
    ):
        self.channel_id = channel_id
        self._get_channel = get_channel
        self.resolver = resolver or InviteResolver()

    async def on_scheduled_event_created(self, event: Any) -> AnnouncementResult:
        channel = self._get_channel(self.channel_id)
        if channel is None:
            LOGGER.error(
                "Error creating invite, could not access channel %s", self.channel_id
            )
            return AnnouncementResult(
                AnnouncementStatus.CHANNEL_UNRESOLVED,
                error=f"channel {self.channel_id} not found",
            )

        ref = ScheduledEventRef.from_event(event)
        LOGGER.info("Announcing event %s in channel %s", ref.event_id, channel.id)
        try:
            url = await self.resolver.resolve(channel, ref.event_id)
        except InviteError as exc:
            LOGGER.error("Could not create invite for event %s: %s", ref.event_id, exc)
            return AnnouncementResult(
                AnnouncementStatus.INVITE_FAILED, event=ref, error=str(exc)
            )

        try:
            await channel.send(ANNOUNCEMENT_TEMPLATE.format(url=url))
        except discord.HTTPException as exc:
            LOGGER.warning(
                "Failed posting announcement for event %s: %s", ref.event_id, exc
            )
            return AnnouncementResult(
                AnnouncementStatus.SEND_FAILED, event=ref, url=url, error=str(exc)
            )
        return AnnouncementResult(AnnouncementStatus.POSTED, event=ref, url=url)
