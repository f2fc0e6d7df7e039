# source_query/constants.py
import re

# Заголовок одиночного (не разбитого на части) ответа
SIMPLE_RESPONSE_HEADER = b'\xFF\xFF\xFF\xFF'

# Типы запросов
A2S_INFO_TYPE = 0x54  # 'T'
A2S_PLAYER_TYPE = 0x55  # 'U'

# Типы ответов
S2A_INFO_TYPE = 0x49  # 'I'
S2C_CHALLENGE_TYPE = 0x41  # 'A'
S2A_PLAYER_TYPE = 0x44  # 'D'

A2S_INFO_PAYLOAD = b'Source Engine Query\x00'
CHALLENGE_PLACEHOLDER = b'\xFF\xFF\xFF\xFF'
CHALLENGE_LENGTH = 4

# Готовые пакеты запросов
A2S_INFO_REQUEST = SIMPLE_RESPONSE_HEADER + bytes([A2S_INFO_TYPE]) + A2S_INFO_PAYLOAD
A2S_PLAYER_CHALLENGE_REQUEST = SIMPLE_RESPONSE_HEADER + bytes([A2S_PLAYER_TYPE]) + CHALLENGE_PLACEHOLDER

# Паттерны ответов (весь буфер, включая нулевые байты)
S2A_INFO = re.compile(rb'^\xFF\xFF\xFF\xFFI', re.DOTALL)
S2C_CHALLENGE = re.compile(rb'^\xFF\xFF\xFF\xFFA(.{4})', re.DOTALL)
S2A_PLAYER = re.compile(rb'^\xFF\xFF\xFF\xFFD', re.DOTALL)

# Extra Data Flags в конце ответа A2S_INFO
EDF_GAME_PORT = 0x80
EDF_STEAM_ID = 0x10
EDF_SOURCE_TV = 0x40
EDF_KEYWORDS = 0x20
EDF_GAME_ID = 0x01

# Значения по умолчанию
DEFAULT_TIMEOUT = 3.0  # секунды
DEFAULT_CONCURRENCY = 5
