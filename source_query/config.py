# source_query/config.py

import json
import os


class Config:

    def __init__(self, config_path=None):
        config_path = config_path or os.path.join(os.path.dirname(os.path.dirname(__file__)), "config.json")
        self.config_path = config_path
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                self._config = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Конфигурационный файл не найден: {config_path}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Ошибка парсинга JSON в конфиге: {e}")

    @classmethod
    def from_dict(cls, data=None):
        """Конфиг в памяти, без файла (тесты, значения по умолчанию)."""
        config = cls.__new__(cls)
        config.config_path = None
        config._config = dict(data or {})
        return config

    def get(self, key, default=None):
        """
        Общий безопасный доступ к любому полю.
        Поддерживает вложенные ключи через точку (например, "QUERY.TIMEOUT").
        """
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        return value if value is not None else default

    @property
    def servers(self):
        """Список серверов для опроса: [{"id": ..., "ip": ..., "port": ...}]"""
        return self._config.get("SERVERS", [])

    @property
    def query_timeout(self) -> float:
        return float(self.get("QUERY.TIMEOUT", 3.0))

    @property
    def query_concurrency(self) -> int:
        return int(self.get("QUERY.CONCURRENCY", 5))
