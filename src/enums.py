"""Enumerations used throughout the HBase table manager."""

from enum import StrEnum


class Compression(StrEnum):
    """Column family compression codec."""

    NONE = "NONE"
    GZ = "GZ"
    LZO = "LZO"
    SNAPPY = "SNAPPY"
    LZ4 = "LZ4"
    BZIP2 = "BZIP2"
    ZSTD = "ZSTD"


class BloomFilterType(StrEnum):
    """Column family bloom filter granularity."""

    NONE = "NONE"
    ROW = "ROW"
    ROWCOL = "ROWCOL"
    ROWPREFIX_FIXED_LENGTH = "ROWPREFIX_FIXED_LENGTH"
