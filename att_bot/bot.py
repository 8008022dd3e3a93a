from __future__ import annotations

import asyncio
import logging
from typing import Any

import discord
from discord.ext import commands

from .announcer import EventAnnouncer
from .commands import setup_commands
from .config import BotConfig, load_config
from .invites import InviteResolver
from .steam import SteamClient
from .status import StatusCommandHandler

# Default to INFO until the configured level is applied at startup
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s"
)
LOGGER = logging.getLogger(__name__)


class AttBot(commands.Bot):
    def __init__(self, config: BotConfig, client: SteamClient | None = None):
        intents = discord.Intents.default()
        intents.guilds = True
        intents.guild_scheduled_events = True
        super().__init__(command_prefix="!", intents=intents)
        self.config = config
        self.client = client or SteamClient()
        self.status_handler = StatusCommandHandler(self.client)
        self.invite_resolver = InviteResolver()
        self.announcer = EventAnnouncer(
            config.event_feed_channel_id,
            get_channel=self.get_channel,
            resolver=self.invite_resolver,
        )

    async def setup_hook(self) -> None:
        guild = discord.Object(id=self.config.owner_guild_id)
        registered = await self.tree.sync(guild=guild)
        LOGGER.info(
            "Registered application commands for guild %s: %s",
            self.config.owner_guild_id,
            [cmd.name for cmd in registered],
        )

    async def on_ready(self):
        LOGGER.info("%s is connected!", self.user)

    async def on_scheduled_event_create(self, event: Any):
        LOGGER.info(
            "Event created: %s (%s) in guild %s",
            getattr(event, "name", "unknown"),
            event.id,
            event.guild_id,
        )
        result = await self.announcer.on_scheduled_event_created(event)
        if result.posted:
            LOGGER.info("Event %s announced: %s", event.id, result.url)
        else:
            LOGGER.warning(
                "Event %s not announced (%s): %s",
                event.id,
                result.status.value,
                result.error,
            )

    async def close(self) -> None:
        await super().close()
        await self.client.close()


async def main():
    bot_config = load_config()
    logging.getLogger().setLevel(bot_config.log_level)
    LOGGER.setLevel(bot_config.log_level)
    bot = AttBot(bot_config)
    await setup_commands(bot)
    async with bot:
        await bot.start(bot_config.token)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
