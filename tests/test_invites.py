import asyncio

import discord
import pytest

from att_bot.invites import (
    INVITE_MAX_AGE,
    INVITE_MAX_USES,
    ChannelResolutionError,
    InviteCreationError,
    InviteResolver,
    ScheduledEventRef,
)
from tests.fakes import FakeCategory, FakeChannel, FakeScheduledEvent, http_exception


def test_policy_constants():
    assert INVITE_MAX_AGE == 86400
    assert INVITE_MAX_USES == 50


def test_resolve_appends_event_to_invite_url():
    channel = FakeChannel(id=10, invite_code="xyz")

    url = asyncio.run(InviteResolver().resolve(channel, 555))

    assert url == "https://discord.gg/xyz?event=555"
    assert len(channel.invite_calls) == 1
    assert channel.invite_calls[0]["max_age"] == INVITE_MAX_AGE
    assert channel.invite_calls[0]["max_uses"] == INVITE_MAX_USES


def test_create_grant_records_policy():
    grant = asyncio.run(InviteResolver().create_grant(FakeChannel(id=10), 1))

    assert grant.channel_id == 10
    assert grant.max_age == INVITE_MAX_AGE
    assert grant.max_uses == INVITE_MAX_USES
    assert grant.url.endswith("?event=1")


def test_unresolved_channel_fails_before_invite_creation():
    with pytest.raises(ChannelResolutionError):
        asyncio.run(InviteResolver().resolve(None, 555))


def test_channel_without_invites_is_a_resolution_error():
    with pytest.raises(ChannelResolutionError):
        asyncio.run(InviteResolver().resolve(FakeCategory(id=3), 555))


def test_platform_rejection_is_wrapped():
    channel = FakeChannel(id=10, invite_error=http_exception(discord.Forbidden))

    with pytest.raises(InviteCreationError) as excinfo:
        asyncio.run(InviteResolver().resolve(channel, 555))

    assert "Missing Access" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, discord.Forbidden)


def test_non_positive_max_age_is_rejected():
    with pytest.raises(ValueError):
        InviteResolver(max_age=0)


def test_event_ref_from_event():
    ref = ScheduledEventRef.from_event(
        FakeScheduledEvent(id=7, guild_id=8, channel_id=9)
    )

    assert ref == ScheduledEventRef(event_id=7, guild_id=8, channel_id=9)
    assert ScheduledEventRef.from_event(FakeScheduledEvent(id=7, guild_id=8)).channel_id is None
