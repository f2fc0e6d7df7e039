# source_query/errors.py
"""
Ошибки одного запроса. Кодек бросает их внутри, QueryClient возвращает их
как значение в QueryResult, наружу они не пробрасываются.
"""


class QueryError(Exception):
    kind = "QueryError"

    def __init__(self, reason=None):
        self.reason = reason
        super().__init__(reason or self.kind)

    def __str__(self):
        if self.reason:
            return f"{self.kind}: {self.reason}"
        return self.kind

    def __eq__(self, other):
        return type(self) is type(other) and self.reason == other.reason

    def __hash__(self):
        return hash((type(self), self.reason))


class QueryTimeout(QueryError):
    """Сервер не ответил за отведённое время."""
    kind = "Timeout"


class NetworkError(QueryError):
    """Ошибка сокета: отправка, приём, ICMP port unreachable и т.п."""
    kind = "Network"


class MalformedResponse(QueryError):
    """Ответ получен, но заголовок или содержимое некорректны."""
    kind = "MalformedResponse"


class ChallengeRejected(QueryError):
    """На запрос challenge пришёл ответ не того типа."""
    kind = "ChallengeRejected"
