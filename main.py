# main.py

import asyncio
import json
import signal
import sys
from source_query.batch.batch_orchestrator import BatchOrchestrator
from source_query.config import Config
from source_query.logger import Logger
from source_query.models.types import QuerySpec


class MainApp:
    def __init__(self, config_path=None):
        self.config_path = config_path
        self.logger = None
        self.orchestrator = None
        self.running = True
        self.shutdown_event = asyncio.Event()

    def load_specs(self, config):
        """
        Проверяет список SERVERS из конфига: непустой ip и port в диапазоне 1-65535.
        Некорректные записи пропускаются с предупреждением.
        """
        specs = []
        for entry in config.servers:
            ip = entry.get("ip") if isinstance(entry, dict) else None
            port = entry.get("port") if isinstance(entry, dict) else None
            if not ip or not str(port).isdigit() or not 0 < int(port) <= 65535:
                self.logger.warning(f"Пропускаю сервер с некорректными ip/port: {entry}")
                continue
            specs.append(QuerySpec(ip=ip, port=int(port), id=entry.get("id")))
        return specs

    async def run(self):
        config = Config(self.config_path)
        self.logger = Logger(config)
        self.logger.info("Starting application...")

        specs = self.load_specs(config)
        if not specs:
            self.logger.error("Не найдено ни одного сервера в конфиге. Выход.")
            self.running = False
            return None

        self.orchestrator = BatchOrchestrator(
            concurrency=config.query_concurrency,
            timeout=config.query_timeout,
            window_delay=float(config.get("QUERY.WINDOW_DELAY", 0.0)),
            logger=self.logger,
        )

        batch_task = asyncio.create_task(self.orchestrator.run_batch(specs))
        shutdown_task = asyncio.create_task(self.shutdown_event.wait())
        await asyncio.wait({batch_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED)

        if not batch_task.done():
            self.logger.info("Received shutdown signal. Cancelling batch...")
            batch_task.cancel()
            await asyncio.gather(batch_task, return_exceptions=True)
            self.running = False
            return None
        shutdown_task.cancel()

        results = batch_task.result()
        body = json.dumps({"results": [result.to_dict() for result in results]}, ensure_ascii=False, indent=2)
        output_file = config.get("OUTPUT_FILE")
        if output_file:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(body)
            self.logger.info(f"Результаты записаны в {output_file}")
        else:
            print(body)

        self.running = False
        self.logger.info("Application shutdown complete.")
        return results


async def main():
    app = MainApp(sys.argv[1] if len(sys.argv) > 1 else None)

    def handle_shutdown(signum, frame):
        if not app.running:
            return
        if app.logger:
            app.logger.info(f"Received shutdown signal {signum}. Shutting down...")
        app.shutdown_event.set()

    signal.signal(signal.SIGINT, handle_shutdown)
    signal.signal(signal.SIGTERM, handle_shutdown)

    await app.run()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
