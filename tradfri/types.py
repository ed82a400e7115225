from __future__ import annotations

from typing import Any, TypedDict, Union

from typing_extensions import NotRequired

# Decoded JSON value as received from the gateway
JsonValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]

# Gateway field keys are numeric strings, hence the functional syntax.

# POST /15011/9063
PskRequestDict = TypedDict("PskRequestDict", {"9090": str})

# 2.01 Created reply to POST /15011/9063
PskResponseDict = TypedDict(
    "PskResponseDict",
    {
        "9091": str,
        "9029": NotRequired[str],  # gateway firmware version
    },
)
