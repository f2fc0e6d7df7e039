# tests/test_query_client.py
"""
QueryClient: полный обмен по UDP на localhost и граничные случаи на фейковых потоках.
"""

import asyncio
import time

import asyncio_dgram

from fakes import (CHALLENGE, DEFAULT_PLAYERS, FakeServerState, build_info_response, build_player_response,
                   build_challenge_response)
from source_query.constants import A2S_INFO_REQUEST, A2S_PLAYER_CHALLENGE_REQUEST
from source_query.errors import QueryTimeout, NetworkError, MalformedResponse, ChallengeRejected
from source_query.models.types import PlayerEntry
from source_query.query_client.query_client import QueryClient

ADDR = ("203.0.113.10", 27015)


async def _respond(server, silent=False):
    """Мини-сервер A2S: отвечает на info, challenge и запрос игроков."""
    while True:
        data, addr = await server.recv()
        if silent:
            continue
        if data == A2S_INFO_REQUEST:
            await server.send(build_info_response(), addr)
        elif data == A2S_PLAYER_CHALLENGE_REQUEST:
            await server.send(build_challenge_response(), addr)
        elif data == b'\xFF\xFF\xFF\xFFU' + CHALLENGE:
            await server.send(build_player_response(DEFAULT_PLAYERS), addr)


async def _with_udp_server(query, silent=False):
    server = await asyncio_dgram.bind(("127.0.0.1", 0))
    task = asyncio.create_task(_respond(server, silent=silent))
    try:
        return await query(server.sockname[1])
    finally:
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        server.close()


def test_query_info_over_udp(logger):
    client = QueryClient(timeout=2.0, logger=logger)
    result = asyncio.run(_with_udp_server(lambda port: client.query_info("127.0.0.1", port)))

    assert result.ok
    assert result.value.name == "My Server"
    assert result.value.map == "de_dust2"
    assert result.value.players == 16
    assert result.value.max_players == 32


def test_query_players_over_udp(logger):
    client = QueryClient(timeout=2.0, logger=logger)
    result = asyncio.run(_with_udp_server(lambda port: client.query_players("127.0.0.1", port)))

    assert result.ok
    assert result.value == [
        PlayerEntry(index=0, name="alice", score=10, duration=61.5),
        PlayerEntry(index=1, name="bob", score=-2, duration=3.25),
    ]


def test_silent_server_times_out_within_budget(logger):
    timeout = 0.3
    client = QueryClient(timeout=5.0, logger=logger)

    async def query(port):
        started = time.monotonic()
        result = await client.query_info("127.0.0.1", port, timeout=timeout)
        return result, time.monotonic() - started

    result, elapsed = asyncio.run(_with_udp_server(query, silent=True))

    assert isinstance(result.error, QueryTimeout)
    assert result.value is None
    assert timeout - 0.01 <= elapsed < timeout + 0.5


def test_player_exchange_sends_challenge_then_player_request(logger):
    state = FakeServerState()
    client = QueryClient(logger=logger, connect=state.connect)

    result = asyncio.run(client.query_players(*ADDR))

    assert result.ok
    assert state.addresses == [ADDR]
    assert state.streams[0].sent == [A2S_PLAYER_CHALLENGE_REQUEST, b'\xFF\xFF\xFF\xFF\x55' + CHALLENGE]
    assert state.streams[0].close_calls == 1


def test_single_timeout_spans_both_legs(logger):
    # Каждый ответ по отдельности укладывается в таймаут, а вместе - нет
    state = FakeServerState(delay=0.15)
    client = QueryClient(logger=logger, connect=state.connect)

    async def scenario():
        info = await client.query_info(*ADDR, timeout=0.25)
        players = await client.query_players(*ADDR, timeout=0.25)
        return info, players

    info, players = asyncio.run(scenario())

    assert info.ok
    assert isinstance(players.error, QueryTimeout)
    assert [stream.close_calls for stream in state.streams] == [1, 1]


def test_no_response_closes_transport_once(logger):
    state = FakeServerState(responses={ADDR: {"info": None}})
    client = QueryClient(logger=logger, connect=state.connect)

    result = asyncio.run(client.query_info(*ADDR, timeout=0.05))

    assert isinstance(result.error, QueryTimeout)
    assert state.streams[0].close_calls == 1
    assert state.open_now == 0


def test_transport_error_is_network_error(logger):
    state = FakeServerState(responses={ADDR: {"info": ConnectionRefusedError(111, "Connection refused")}})
    client = QueryClient(logger=logger, connect=state.connect)

    result = asyncio.run(client.query_info(*ADDR))

    assert isinstance(result.error, NetworkError)
    assert "Connection refused" in str(result.error)
    assert state.streams[0].close_calls == 1


def test_connect_failure_is_network_error(logger):
    async def failing_connect(addr):
        raise OSError("Network is unreachable")

    client = QueryClient(logger=logger, connect=failing_connect)
    result = asyncio.run(client.query_players(*ADDR))

    assert isinstance(result.error, NetworkError)
    assert result.error.reason == "Network is unreachable"


def test_transport_closed_is_network_error(logger):
    state = FakeServerState(responses={ADDR: {"info": asyncio_dgram.TransportClosed()}})
    client = QueryClient(logger=logger, connect=state.connect)

    result = asyncio.run(client.query_info(*ADDR))

    assert isinstance(result.error, NetworkError)
    assert result.error.reason == "TransportClosed"


def test_garbage_info_response_is_malformed(logger):
    state = FakeServerState(responses={ADDR: {"info": b'\x01\x02\x03'}})
    client = QueryClient(logger=logger, connect=state.connect)

    result = asyncio.run(client.query_info(*ADDR))

    assert isinstance(result.error, MalformedResponse)
    assert state.streams[0].close_calls == 1


def test_wrong_challenge_type_is_rejected(logger):
    # Ответ достаточной длины, но с типом 'D' вместо 'A'
    state = FakeServerState(responses={ADDR: {"challenge": build_player_response(DEFAULT_PLAYERS)}})
    client = QueryClient(logger=logger, connect=state.connect)

    result = asyncio.run(client.query_players(*ADDR))

    assert isinstance(result.error, ChallengeRejected)
    assert state.streams[0].sent == [A2S_PLAYER_CHALLENGE_REQUEST]
    assert state.streams[0].close_calls == 1


def test_malformed_player_response(logger):
    state = FakeServerState(responses={ADDR: {"players": b'\xFF\xFF\xFF\xFFX'}})
    client = QueryClient(logger=logger, connect=state.connect)

    result = asyncio.run(client.query_players(*ADDR))

    assert isinstance(result.error, MalformedResponse)
