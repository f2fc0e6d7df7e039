# source_query/models/types.py
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Generic, List, Optional, TypeVar

from source_query.errors import QueryError

T = TypeVar("T")


@dataclass(frozen=True)
class ServerInfo:
    name: str = ""
    map: str = ""
    folder: str = ""
    game: str = ""
    app_id: int = 0
    players: int = 0
    max_players: int = 0
    bots: int = 0
    server_type: str = ""
    environment: str = ""
    protocol: int = 0
    visibility: int = 0
    vac: int = 0
    version: str = ""
    extra_data_flags: int = 0
    game_port: int = 0
    steam_id: int = 0
    keywords: str = ""
    game_id: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "map": self.map,
            "folder": self.folder,
            "game": self.game,
            "appId": self.app_id,
            "players": self.players,
            "maxPlayers": self.max_players,
            "bots": self.bots,
            "serverType": self.server_type,
            "environment": self.environment,
            "protocol": self.protocol,
            "visibility": self.visibility,
            "vac": self.vac,
            "version": self.version,
            "gamePort": self.game_port,
            "steamId": self.steam_id,
            "keywords": self.keywords,
            "gameId": self.game_id,
        }


@dataclass(frozen=True)
class PlayerEntry:
    index: int
    name: str
    score: int
    duration: float  # секунды на сервере

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Результат одного запроса: либо value, либо error."""
    value: Optional[T] = None
    error: Optional[QueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class QuerySpec:
    ip: str
    port: int
    id: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuerySpec":
        return cls(ip=data["ip"], port=int(data["port"]), id=data.get("id"))


@dataclass
class QueryErrors:
    server_info: Optional[QueryError] = None
    players: Optional[QueryError] = None


@dataclass
class BatchResult:
    ip: str
    port: int
    id: Any = None
    server_info: Optional[ServerInfo] = None
    players: Optional[List[PlayerEntry]] = None
    errors: QueryErrors = field(default_factory=QueryErrors)

    def to_dict(self) -> Dict[str, Any]:
        """Тело ответа в формате JSON (camelCase, ошибки строками)."""
        errors = {}
        if self.errors.server_info is not None:
            errors["serverInfo"] = str(self.errors.server_info)
        if self.errors.players is not None:
            errors["players"] = str(self.errors.players)
        return {
            "id": self.id,
            "ip": self.ip,
            "port": self.port,
            "serverInfo": self.server_info.to_dict() if self.server_info else None,
            "players": [p.to_dict() for p in self.players] if self.players is not None else None,
            "errors": errors,
        }
