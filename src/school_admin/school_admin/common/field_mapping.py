"""Field-name translation between the camel-case wire/document shape and
snake-case SQL columns.

Plain camel/snake conversion splits on capitals only, so names with embedded
digits need explicit overrides (``signatureBase64`` <-> ``signature_base_64``).
"""
from __future__ import annotations

import re
from typing import Any, Mapping

_CAMEL_TO_SNAKE_OVERRIDES = {
    "signatureBase64": "signature_base_64",
    "logoBase64": "logo_base_64",
    "officialGarudaBase64": "official_garuda_base_64",
    "directorSignatureBase64": "director_signature_base_64",
}
_SNAKE_TO_CAMEL_OVERRIDES = {v: k for k, v in _CAMEL_TO_SNAKE_OVERRIDES.items()}

_CAPITAL = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    override = _CAMEL_TO_SNAKE_OVERRIDES.get(name)
    if override:
        return override
    return _CAPITAL.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    override = _SNAKE_TO_CAMEL_OVERRIDES.get(name)
    if override:
        return override
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_snake_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {camel_to_snake(k): v for k, v in data.items()}


def to_camel_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {snake_to_camel(k): v for k, v in data.items()}
