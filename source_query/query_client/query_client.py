# source_query/query_client/query_client.py
import asyncio
import enum
import time

import asyncio_dgram
from source_query.constants import DEFAULT_TIMEOUT
from source_query.errors import QueryError, QueryTimeout, NetworkError
from source_query.logger import LoggerMixin
from source_query.models.types import QueryResult
from source_query.query_client.query_request.info_query import build_info_request, parse_info_response
from source_query.query_client.query_request.challenge_query import build_challenge_request, parse_challenge_response
from source_query.query_client.query_request.player_query import build_player_request, parse_player_response


class ChallengeState(enum.Enum):
    AWAITING_CHALLENGE = "awaiting_challenge"
    AWAITING_PLAYERS = "awaiting_players"


class QueryClient(LoggerMixin):
    """
    Клиент Source Engine Query (A2S) поверх UDP.
    Каждый запрос открывает свой сокет, укладывается в один таймаут и всегда
    закрывает сокет. Ошибки не бросаются, а возвращаются в QueryResult.
    """

    def __init__(self, timeout=DEFAULT_TIMEOUT, logger=None, connect=None):
        """
        :param timeout: Таймаут запроса по умолчанию, в секундах.
        :param logger: Логгер; по умолчанию общий Logger.
        :param connect: Фабрика UDP-потока, по умолчанию asyncio_dgram.connect.
        """
        super().__init__(logger)
        self.timeout = timeout
        self._connect = connect or asyncio_dgram.connect

    async def query_info(self, ip, port, timeout=None) -> QueryResult:
        """A2S_INFO: один запрос, один ответ."""
        return await self._run("A2S_INFO", ip, port, timeout, self._info_exchange)

    async def query_players(self, ip, port, timeout=None) -> QueryResult:
        """A2S_PLAYER: challenge, затем список игроков. Таймаут общий на оба шага."""
        return await self._run("A2S_PLAYER", ip, port, timeout, self._player_exchange)

    async def _info_exchange(self, stream):
        await stream.send(build_info_request())
        data, _ = await stream.recv()
        return parse_info_response(data)

    async def _player_exchange(self, stream):
        state = ChallengeState.AWAITING_CHALLENGE
        await stream.send(build_challenge_request())
        while True:
            data, _ = await stream.recv()
            if state is ChallengeState.AWAITING_CHALLENGE:
                challenge = parse_challenge_response(data)
                await stream.send(build_player_request(challenge))
                state = ChallengeState.AWAITING_PLAYERS
            else:
                return parse_player_response(data)

    async def _run(self, request_type, ip, port, timeout, exchange) -> QueryResult:
        timeout = self.timeout if timeout is None else timeout
        stream = None

        async def attempt():
            nonlocal stream
            stream = await self._connect((ip, port))
            return await exchange(stream)

        started = time.monotonic()
        try:
            value = await asyncio.wait_for(attempt(), timeout)
        except asyncio.TimeoutError:
            error = QueryTimeout(f"no response within {timeout:g}s")
        except QueryError as e:
            error = e
        except (OSError, asyncio_dgram.TransportClosed, OverflowError, ValueError, TypeError) as e:
            error = NetworkError(str(e) or type(e).__name__)
        else:
            self.logger.debug(f"{request_type} {ip}:{port}: ответ получен за "
                              f"{time.monotonic() - started:.3f}s")
            return QueryResult(value=value)
        finally:
            if stream is not None:
                stream.close()

        self.logger.warning(f"{request_type} {ip}:{port}: {error}")
        return QueryResult(error=error)
