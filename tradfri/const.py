"""Constants for the gateway client."""
from __future__ import annotations

DEFAULT_PORT = 5684

# Identity the gateway accepts together with the security code printed on
# its label. Only valid for the credential exchange request.
PREAUTH_IDENTITY = "Client_identity"

# Delay between sequential per-entity fetches while listing. The gateway
# drops requests that arrive too quickly; the real limit is undocumented.
DEFAULT_LIST_DELAY = 0.1

# Timeout applied by the transport adapter to a single exchange (seconds)
REQUEST_TIMEOUT = 10

# Resource roots
ROOT_DEVICES = 15001
ROOT_GROUPS = 15004
ROOT_MOODS = 15005
ROOT_GATEWAY = 15011

# Fixed resources
PATH_GATEWAY_IDENT = "/15011/9063"
PATH_GATEWAY_INFO = "/15011/15012"
PATH_GATEWAY_REBOOT = "/15011/9030"
PATH_GATEWAY_FACTORY_RESET = "/15011/9031"
PATH_DEVICES = "/15001"
PATH_GROUPS = "/15004"
PATH_GROUP_ADD = "/15004/add"
PATH_MOODS = "/15005"

# Gateway-supported color temperature range
MIRED_MIN = 250
MIRED_MAX = 454

# Dim level range (not a percentage)
DIM_MIN = 0
DIM_MAX = 254

# Scale of the gateway's CIE xy coordinate space
COLOR_XY_SCALE = 65535

# Config keys
CONF_HOST = "host"
CONF_KEY = "key"
CONF_IDENTITY = "identity"
CONF_PSK = "psk"
CONF_PORT = "port"
CONF_LIST_DELAY = "list_delay"
CONF_REQUEST_TIMEOUT = "request_timeout"
