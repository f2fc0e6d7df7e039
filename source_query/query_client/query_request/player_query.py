# source_query/query_client/query_request/player_query.py

from source_query.constants import SIMPLE_RESPONSE_HEADER, A2S_PLAYER_TYPE, CHALLENGE_LENGTH, S2A_PLAYER
from source_query.errors import MalformedResponse
from source_query.models.types import PlayerEntry
from source_query.query_client.query_request.packet_reader import PacketTruncated, read_header


def build_player_request(challenge):
    """
    Запрос A2S_PLAYER с challenge, полученным от сервера.
    :param challenge: 4 байта из ответа S2C_CHALLENGE.
    :return: FF FF FF FF 'U' <challenge>
    """
    challenge = bytes(challenge)
    if len(challenge) != CHALLENGE_LENGTH:
        raise ValueError(f"challenge должен быть {CHALLENGE_LENGTH} байта, получено {len(challenge)}")
    return SIMPLE_RESPONSE_HEADER + bytes([A2S_PLAYER_TYPE]) + challenge


def parse_player_response(data):
    """
    Разбирает ответ A2S_PLAYER в список PlayerEntry в порядке пакета.
    Если игроков в пакете меньше, чем заявлено, возвращаем те, что есть.
    Обрезанная последняя запись отбрасывается без ошибки.
    """
    reader = read_header(data, "Player")
    if not S2A_PLAYER.match(data):
        raise MalformedResponse(f"unexpected player response type 0x{data[4]:02X}")

    players = []
    try:
        count = reader.read_byte()  # Количество игроков
        for _ in range(count):
            index = reader.read_byte()
            name = reader.read_string(strict=True)
            score = reader.read_long()
            duration = reader.read_float()
            players.append(PlayerEntry(index=index, name=name, score=score, duration=duration))
    except PacketTruncated:
        pass

    return players
