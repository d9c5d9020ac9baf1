from enum import Enum


class ConnectionState(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"


COLLECTION_PREFIX = "oembed_cache."
EXPIRES_AT_INDEX = "ttl_expires_at"
