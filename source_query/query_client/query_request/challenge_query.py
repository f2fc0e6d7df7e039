# source_query/query_client/query_request/challenge_query.py

from source_query.constants import (A2S_PLAYER_CHALLENGE_REQUEST, S2C_CHALLENGE, S2C_CHALLENGE_TYPE,
                                    SIMPLE_RESPONSE_HEADER)
from source_query.errors import ChallengeRejected, MalformedResponse


def build_challenge_request():
    """Запрос challenge для A2S_PLAYER: FF FF FF FF 'U' FF FF FF FF."""
    return A2S_PLAYER_CHALLENGE_REQUEST


def parse_challenge_response(data):
    """
    Извлекает 4 байта challenge из ответа FF FF FF FF 'A' <challenge>.
    Любой другой тип ответа, даже достаточной длины, и слишком короткий
    ответ - ChallengeRejected. Чужой заголовок - MalformedResponse.
    """
    if len(data) >= 4 and data[:4] != SIMPLE_RESPONSE_HEADER:
        raise MalformedResponse("challenge response has invalid header")
    match = S2C_CHALLENGE.match(data)
    if not match:
        if len(data) > 4 and data[4] != S2C_CHALLENGE_TYPE:
            raise ChallengeRejected(f"unexpected response type 0x{data[4]:02X}")
        raise ChallengeRejected(f"challenge response too short ({len(data)} bytes)")
    return match.group(1)
