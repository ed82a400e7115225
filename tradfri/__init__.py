"""Client for smart-lighting gateways speaking CoAP over DTLS."""
from __future__ import annotations

from .client import TradfriClient
from .color import (
    dim_to_percentage,
    hex_rgb_to_color_xy_dim,
    kelvin_to_mired,
    kelvin_to_rgb,
    mired_to_kelvin,
    ms_to_duration,
    percentage_to_dim,
    rgb_to_hex,
)
from .config import ClientConfig
from .exceptions import (
    AuthenticationFailed,
    DecodeError,
    FormatError,
    GatewayError,
    TradfriError,
    TransportError,
    ValidationError,
)
from .models import (
    Device,
    DeviceInfo,
    DeviceType,
    Gateway,
    Group,
    LightControl,
    Mood,
    PowerSource,
)
from .observe import EventStream, Subscription
from .protocols import ChannelConnector, Method, Response, SecureChannel
from .session import SessionManager, SessionState

__version__ = "0.1.0"

__all__ = [
    # Client
    "TradfriClient",
    "ClientConfig",
    "SessionManager",
    "SessionState",
    "Subscription",
    "EventStream",
    # Channel interface
    "ChannelConnector",
    "SecureChannel",
    "Method",
    "Response",
    # Exceptions
    "TradfriError",
    "TransportError",
    "AuthenticationFailed",
    "DecodeError",
    "ValidationError",
    "FormatError",
    "GatewayError",
    # Models
    "Device",
    "DeviceInfo",
    "DeviceType",
    "Gateway",
    "Group",
    "LightControl",
    "Mood",
    "PowerSource",
    # Color conversion
    "dim_to_percentage",
    "hex_rgb_to_color_xy_dim",
    "kelvin_to_mired",
    "kelvin_to_rgb",
    "mired_to_kelvin",
    "ms_to_duration",
    "percentage_to_dim",
    "rgb_to_hex",
]
