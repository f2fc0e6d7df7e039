# source_query/query_client/query_request/packet_reader.py

import struct

from source_query.constants import SIMPLE_RESPONSE_HEADER
from source_query.errors import MalformedResponse


class PacketTruncated(Exception):
    """В буфере не хватает байт для очередного поля."""


class PacketReader:
    """
    Курсор по входящему пакету. Все числа little-endian.
    Каждый read_* либо сдвигает offset, либо бросает PacketTruncated,
    не меняя offset.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self.data = bytes(data)
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _unpack(self, fmt):
        size = struct.calcsize(fmt)
        if self.remaining < size:
            raise PacketTruncated(fmt)
        value = struct.unpack_from(fmt, self.data, self.offset)[0]
        self.offset += size
        return value

    def read_byte(self) -> int:
        return self._unpack('<B')

    def read_char(self) -> str:
        return chr(self.read_byte())

    def read_short(self) -> int:
        return self._unpack('<H')

    def read_long(self) -> int:
        return self._unpack('<i')

    def read_long_long(self) -> int:
        return self._unpack('<Q')

    def read_float(self) -> float:
        return self._unpack('<f')

    def read_string(self, strict=False) -> str:
        """
        Строка до первого 0x00. Без терминатора: при strict бросает
        PacketTruncated, иначе возвращает остаток буфера.
        """
        end = self.data.find(b'\x00', self.offset)
        if end == -1:
            if strict:
                raise PacketTruncated("string")
            end = len(self.data)
        value = self.data[self.offset:end].decode('utf-8', errors='replace')
        self.offset = min(end + 1, len(self.data))
        return value


def read_header(data: bytes, kind: str) -> PacketReader:
    """
    Проверяет заголовок FF FF FF FF + байт типа.
    Возвращает ридер, стоящий сразу после байта типа.
    """
    if len(data) < 5:
        raise MalformedResponse(f"{kind} response too short ({len(data)} bytes)")
    if data[:4] != SIMPLE_RESPONSE_HEADER:
        raise MalformedResponse(f"{kind} response has invalid header")
    return PacketReader(data, offset=5)
