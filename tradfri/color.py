"""Color conversions between human units and gateway wire units.

The gateway understands color temperature in mired (clamped to the range
its white-spectrum bulbs support), colors as CIE xy chromaticity scaled to
0..65535, and brightness as a 0..254 dim level. Everything here is a pure
function; the only failures are bad inputs.
"""
from __future__ import annotations

import math
import re

from .const import COLOR_XY_SCALE, DIM_MAX, DIM_MIN, MIRED_MAX, MIRED_MIN
from .exceptions import FormatError

_HEX_RGB = re.compile(r"^[0-9a-fA-F]{6}$")

# Wide gamut D65 transform used by the gateway's color bulbs
_XYZ_MATRIX = (
    (0.664511, 0.154324, 0.162028),
    (0.313881, 0.668433, 0.047685),
    (0.000088, 0.072310, 0.986039),
)


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def kelvin_to_mired(kelvin: float) -> int:
    """Convert a color temperature to mired, clamped to the gateway range.

    Args:
        kelvin: Color temperature in Kelvin.

    Returns:
        Mired value in [250, 454].

    Raises:
        ValueError: Kelvin is not positive.
    """
    if kelvin <= 0:
        raise ValueError(f"Color temperature must be positive, got {kelvin}")
    return int(_clamp(_round_half_up(1_000_000 / kelvin), MIRED_MIN, MIRED_MAX))


def mired_to_kelvin(mired: float) -> int:
    """Convert mired to Kelvin.

    The input is clamped to [250, 454] before dividing, so out-of-range
    values saturate at 4000K/2203K instead of diverging.
    """
    mired = _clamp(mired, MIRED_MIN, MIRED_MAX)
    return _round_half_up(1_000_000 / mired)


def kelvin_to_rgb(kelvin: float) -> tuple[float, float, float]:
    """Approximate the RGB appearance of a black-body radiator.

    Piecewise fits of each channel against kelvin / 100. 6600K is pure
    white; warmer temperatures keep red saturated while green and blue
    fall, cooler ones drop red and green while blue stays saturated.

    Returns:
        (r, g, b) tuple, each component in [0, 1].
    """
    if kelvin <= 0:
        raise ValueError(f"Color temperature must be positive, got {kelvin}")
    temp = kelvin / 100

    if temp <= 66:
        red = 255.0
        green = 99.4708025861 * math.log(temp) - 161.1195681661
    else:
        red = 329.698727446 * (temp - 60) ** -0.1332047592
        green = 288.1221695283 * (temp - 60) ** -0.0755148492

    if temp >= 66:
        blue = 255.0
    elif temp <= 19:
        blue = 0.0
    else:
        blue = 138.5177312231 * math.log(temp - 10) - 305.0447927307

    return (
        _clamp(red / 255, 0.0, 1.0),
        _clamp(green / 255, 0.0, 1.0),
        _clamp(blue / 255, 0.0, 1.0),
    )


def rgb_to_hex(red: float, green: float, blue: float) -> str:
    """Format [0, 1] RGB components as a six digit lowercase hex string."""
    return "".join(
        f"{_round_half_up(_clamp(channel, 0.0, 1.0) * 255):02x}"
        for channel in (red, green, blue)
    )


def _gamma_expand(channel: float) -> float:
    """Undo sRGB companding for a component in [0, 1]."""
    if channel > 0.04045:
        return ((channel + 0.055) / (1.0 + 0.055)) ** 2.4
    return channel / 12.92


def hex_rgb_to_color_xy_dim(value: str) -> tuple[int, int, int]:
    """Convert a hex RGB color to gateway xy coordinates and brightness.

    Args:
        value: Exactly six hexadecimal digits, e.g. "ff0000".

    Returns:
        (x, y, dim) where x and y are in the gateway's 0..65535 space and
        dim is a 0..100 brightness percentage.

    Raises:
        FormatError: Input is not exactly six hex digits.
    """
    if not isinstance(value, str) or not _HEX_RGB.match(value):
        raise FormatError(str(value), "six hexadecimal digits")

    rgb = [
        _gamma_expand(int(value[i : i + 2], 16) / 255.0) for i in range(0, 6, 2)
    ]
    big_x, big_y, big_z = (
        row[0] * rgb[0] + row[1] * rgb[1] + row[2] * rgb[2] for row in _XYZ_MATRIX
    )

    total = big_x + big_y + big_z
    if total == 0:
        # pure black has no chromaticity
        return 0, 0, 0

    x = int(big_x / total * COLOR_XY_SCALE)
    y = int(big_y / total * COLOR_XY_SCALE)
    dim = min(100, int(big_y * 100))
    return x, y, dim


def dim_to_percentage(dim: int) -> int:
    """Rescale a 0..254 dim level to a 0..100 percentage."""
    if not DIM_MIN <= dim <= DIM_MAX:
        raise ValueError(f"Dim level must be in [{DIM_MIN}, {DIM_MAX}], got {dim}")
    return _round_half_up(dim * 100 / DIM_MAX)


def percentage_to_dim(percentage: float) -> int:
    """Rescale a 0..100 percentage to a 0..254 dim level."""
    if not 0 <= percentage <= 100:
        raise ValueError(f"Percentage must be in [0, 100], got {percentage}")
    return _round_half_up(percentage * DIM_MAX / 100)


def ms_to_duration(ms: int) -> int:
    """Convert milliseconds to the gateway's transition duration field."""
    return ms * 100
