# source_query/query_client/query_request/info_query.py

from source_query.constants import (A2S_INFO_REQUEST, S2A_INFO, EDF_GAME_PORT, EDF_STEAM_ID, EDF_SOURCE_TV,
                                    EDF_KEYWORDS, EDF_GAME_ID)
from source_query.errors import MalformedResponse
from source_query.models.types import ServerInfo
from source_query.query_client.query_request.packet_reader import PacketTruncated, read_header


def build_info_request():
    """Запрос A2S_INFO: FF FF FF FF 'T' "Source Engine Query" 00."""
    return A2S_INFO_REQUEST


def parse_info_response(data):
    """
    Разбирает ответ A2S_INFO.
    Битый заголовок или чужой тип ответа - MalformedResponse. Обрезанный хвост
    ошибкой не считается: недостающие поля остаются по умолчанию.
    """
    reader = read_header(data, "Info")
    if not S2A_INFO.match(data):
        raise MalformedResponse(f"unexpected info response type 0x{data[4]:02X}")

    fields = {}
    try:
        fields["protocol"] = reader.read_byte()
        fields["name"] = reader.read_string()  # Название сервера
        fields["map"] = reader.read_string()  # Карта
        fields["folder"] = reader.read_string()  # Папка игры
        fields["game"] = reader.read_string()  # Игра
        fields["app_id"] = reader.read_short()
        fields["players"] = reader.read_byte()
        fields["max_players"] = reader.read_byte()
        fields["bots"] = reader.read_byte()
        fields["server_type"] = reader.read_char()  # 'd', 'l' или 'p'
        fields["environment"] = reader.read_char()  # 'l', 'w', 'm' или 'o'
        fields["visibility"] = reader.read_byte()  # 1 - с паролем
        fields["vac"] = reader.read_byte()
        fields["version"] = reader.read_string()
        _read_extra_data(reader, fields)
    except PacketTruncated:
        pass

    # Остаток буфера после известных полей игнорируем
    return ServerInfo(**fields)


def _read_extra_data(reader, fields):
    edf = reader.read_byte()
    fields["extra_data_flags"] = edf
    if edf & EDF_GAME_PORT:
        fields["game_port"] = reader.read_short()
    if edf & EDF_STEAM_ID:
        fields["steam_id"] = reader.read_long_long()
    if edf & EDF_SOURCE_TV:
        # Порт и имя SourceTV не сохраняем
        reader.read_short()
        reader.read_string()
    if edf & EDF_KEYWORDS:
        fields["keywords"] = reader.read_string()
    if edf & EDF_GAME_ID:
        fields["game_id"] = reader.read_long_long()
