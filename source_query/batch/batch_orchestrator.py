# source_query/batch/batch_orchestrator.py
import asyncio
from typing import List

from source_query.constants import DEFAULT_CONCURRENCY, DEFAULT_TIMEOUT
from source_query.logger import LoggerMixin
from source_query.models.types import BatchResult, QueryErrors, QuerySpec
from source_query.query_client.query_client import QueryClient


class BatchOrchestrator(LoggerMixin):
    """
    Опрашивает много серверов окнами по concurrency штук.
    Следующее окно стартует только после завершения предыдущего, поэтому
    одновременно открыто не больше concurrency * 2 сокетов.
    """

    def __init__(self, client=None, concurrency=DEFAULT_CONCURRENCY, timeout=None, window_delay=0.0,
                 logger=None):
        super().__init__(logger)
        self.client = client or QueryClient(timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
                                           logger=self.logger)
        self.concurrency = concurrency
        self.timeout = timeout
        self.window_delay = window_delay

    async def query_server(self, ip, port, timeout=None, server_id=None) -> BatchResult:
        """
        Опрос одного сервера: A2S_INFO и A2S_PLAYER параллельно.
        Ошибка одного подзапроса не мешает другому.
        """
        timeout = self.timeout if timeout is None else timeout
        info, players = await asyncio.gather(
            self.client.query_info(ip, port, timeout),
            self.client.query_players(ip, port, timeout),
        )
        return BatchResult(
            id=server_id,
            ip=ip,
            port=port,
            server_info=info.value,
            players=players.value,
            errors=QueryErrors(server_info=info.error, players=players.error),
        )

    async def run_batch(self, specs, concurrency=None, timeout=None) -> List[BatchResult]:
        """
        :param specs: QuerySpec или dict вида {"id", "ip", "port"}.
        :return: По одному BatchResult на каждый spec, в исходном порядке.
        """
        concurrency = self.concurrency if concurrency is None else concurrency
        if concurrency < 1:
            raise ValueError(f"concurrency должен быть >= 1, получено {concurrency}")
        specs = [spec if isinstance(spec, QuerySpec) else QuerySpec.from_dict(spec) for spec in specs]

        self.logger.info(f"Batch query for {len(specs)} servers")
        windows = (len(specs) + concurrency - 1) // concurrency
        results = []
        for number, start in enumerate(range(0, len(specs), concurrency), start=1):
            if number > 1 and self.window_delay:
                await asyncio.sleep(self.window_delay)
            window = specs[start:start + concurrency]
            results.extend(await asyncio.gather(
                *(self.query_server(spec.ip, spec.port, timeout, server_id=spec.id) for spec in window)
            ))
            self.logger.info(f"Completed window {number}/{windows}")

        self.logger.info(f"Batch query complete: {len(results)} servers processed")
        return results


async def query_server(ip, port, timeout=DEFAULT_TIMEOUT, logger=None) -> BatchResult:
    return await BatchOrchestrator(timeout=timeout, logger=logger).query_server(ip, port)


async def run_batch(specs, concurrency=DEFAULT_CONCURRENCY, timeout=DEFAULT_TIMEOUT, logger=None) -> List[BatchResult]:
    return await BatchOrchestrator(concurrency=concurrency, timeout=timeout, logger=logger).run_batch(specs)
