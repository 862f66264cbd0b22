from enum import IntEnum, StrEnum


class SortDirection(IntEnum):
    ASC = 1
    DESC = -1


class ValueKind(StrEnum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    OTHER = "other"
