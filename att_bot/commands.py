from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Dict

import discord

if TYPE_CHECKING:
    from .bot import AttBot

LOGGER = logging.getLogger(__name__)


class CommandName(enum.Enum):
    STATUS = "status"


COMMAND_DESCRIPTIONS: Dict[CommandName, str] = {
    CommandName.STATUS: "Query the server to list all running instances.",
}


MESSAGE_LIMIT = 2000
TRUNCATED_NOTE = "\n(report truncated)"
STATUS_DELIVERY_FAILED = "Could not deliver the status report, please try again."


def truncate_message(content: str, limit: int = MESSAGE_LIMIT) -> str:
    if len(content) <= limit:
        return content
    cut = content[: limit - len(TRUNCATED_NOTE)]
    # Drop the partial last line.
    if "\n" in cut:
        cut = cut.rsplit("\n", 1)[0]
    return cut + TRUNCATED_NOTE


class UnknownCommandError(LookupError):
    pass


def resolve_command(name: str) -> CommandName:
    try:
        return CommandName(name)
    except ValueError:
        raise UnknownCommandError(f"Unknown command: {name}") from None


async def setup_commands(bot: "AttBot"):
    tree = bot.tree
    guild = discord.Object(id=bot.config.owner_guild_id)

    async def status(interaction: discord.Interaction):
        await interaction.response.defer(thinking=True)
        content = await bot.status_handler.run(
            bot.config.steam_api_key, bot.config.servers
        )
        try:
            await interaction.followup.send(truncate_message(content))
        except Exception as exc:
            LOGGER.error("Cannot respond to slash command: %s", exc)
            try:
                await interaction.followup.send(STATUS_DELIVERY_FAILED)
            except Exception:
                LOGGER.debug("Fallback followup for status suppressed.")

    handlers: Dict[CommandName, Callable[[discord.Interaction], Awaitable[None]]] = {
        CommandName.STATUS: status,
    }

    @bot.listen("on_interaction")
    async def log_app_command(interaction: discord.Interaction):
        if interaction.type != discord.InteractionType.application_command:
            return
        data = interaction.data or {}
        command = resolve_command(str(data.get("name", "")))
        guild_label = (
            f"{interaction.guild.name} ({interaction.guild.id})"
            if interaction.guild
            else "unknown-guild"
        )
        LOGGER.info(
            "Slash command %s by %s in %s",
            command.value,
            getattr(interaction.user, "id", "unknown"),
            guild_label,
        )

    for name in CommandName:
        tree.command(
            name=name.value,
            description=COMMAND_DESCRIPTIONS[name],
            guild=guild,
        )(handlers[name])
