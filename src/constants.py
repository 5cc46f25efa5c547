"""Cluster defaults for column family attributes left unset in a schema document."""

from typing import Final

from src.enums import BloomFilterType, Compression

DEFAULT_MAX_VERSIONS: Final[int] = 1
DEFAULT_COMPRESSION: Final[Compression] = Compression.NONE
DEFAULT_IN_MEMORY: Final[bool] = False
DEFAULT_BLOCK_CACHE_ENABLED: Final[bool] = True
DEFAULT_BLOCK_SIZE: Final[int] = 64 * 1024
# HConstants.FOREVER: cells never expire.
DEFAULT_TIME_TO_LIVE: Final[int] = 2_147_483_647
DEFAULT_BLOOM_FILTER: Final[BloomFilterType] = BloomFilterType.ROW
DEFAULT_REPLICATION_SCOPE: Final[int] = 0

# Separates family from qualifier in a column key, so a family name may not contain it.
FAMILY_NAME_SEPARATOR: Final[str] = ":"
