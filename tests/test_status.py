import asyncio

from att_bot.report import GREETING
from att_bot.status import LOOKUP_DELAY_SECONDS, StatusCommandHandler
from att_bot.steam import Found, NotFound, ServerSnapshot, TransportError
from tests.fakes import FakeSteamClient, ScriptedLookup, server_list, steam_record


def make_handler(lookup):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    return StatusCommandHandler(lookup, sleep=fake_sleep), sleeps


def test_found_server_end_to_end():
    client = FakeSteamClient({"10.0.0.1:2302": server_list(steam_record())})
    handler, _sleeps = make_handler(client)

    report = asyncio.run(handler.run("KEY", ["10.0.0.1:2302"]))

    assert report.splitlines() == [
        GREETING,
        "Server Status for Base:",
        "Map: Altis",
        "Players: 5/10",
        "Connect: steam://connect/10.0.0.1:2302",
    ]


def test_missing_server_end_to_end():
    client = FakeSteamClient({"10.0.0.2:2302": {"response": {}}})
    handler, _sleeps = make_handler(client)

    report = asyncio.run(handler.run("KEY", ["10.0.0.2:2302"]))

    assert report.splitlines() == [
        GREETING,
        "no server found at 10.0.0.2:2302 or the server is down, sorry!",
    ]


def test_failure_does_not_stop_later_lookups():
    snapshot = ServerSnapshot("Late", "Tanoa", 1, 40, "10.0.0.9:2302", 2302)
    lookup = ScriptedLookup(
        {
            "10.0.0.8:2302": TransportError("connection reset"),
            "10.0.0.9:2302": Found(snapshot),
        }
    )
    handler, _sleeps = make_handler(lookup)

    report = asyncio.run(handler.run("KEY", ["10.0.0.8:2302", "10.0.0.9:2302"]))

    assert lookup.calls == ["10.0.0.8:2302", "10.0.0.9:2302"]
    lines = report.splitlines()
    assert lines[1] == "Error grabbing details for 10.0.0.8:2302: connection reset"
    assert lines[2] == "Server Status for Late:"


def test_throttle_is_awaited_between_lookups_only():
    lookup = ScriptedLookup({"a:1": NotFound(), "b:2": NotFound(), "c:3": NotFound()})
    handler, sleeps = make_handler(lookup)

    asyncio.run(handler.run("KEY", ["a:1", "b:2", "c:3"]))

    assert sleeps == [LOOKUP_DELAY_SECONDS, LOOKUP_DELAY_SECONDS]


def test_repeated_runs_produce_identical_reports():
    snapshot = ServerSnapshot("Base", "Altis", 5, 10, "10.0.0.1:2302", 2302)
    results = {
        "10.0.0.1:2302": Found(snapshot),
        "10.0.0.2:2302": NotFound(),
        "10.0.0.3:2302": TransportError("timeout"),
    }
    targets = list(results)
    handler, _sleeps = make_handler(ScriptedLookup(results))

    first = asyncio.run(handler.run("KEY", targets))
    second = asyncio.run(handler.run("KEY", targets))

    assert first == second
