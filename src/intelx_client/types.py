"""Typed records decoded from IntelX JSON responses.

Decoding mirrors JSON unmarshalling into typed structs: a field that is
absent or ``null`` takes its zero value, a field of the wrong JSON type is a
``DecodeError``, and unknown fields are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import DecodeError


def _expect_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what}: expected JSON object, got {type(data).__name__}")
    return data


def _str(data: dict[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{what}.{key}: expected string, got {type(value).__name__}")
    return value


def _bool(data: dict[str, Any], key: str, what: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"{what}.{key}: expected boolean, got {type(value).__name__}")
    return value


def _int(data: dict[str, Any], key: str, what: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass but not a JSON number
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{what}.{key}: expected integer, got {type(value).__name__}")
    return value


def _str_list(data: dict[str, Any], key: str, what: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise DecodeError(f"{what}.{key}: expected list of strings")
    return list(value)


def _object(data: dict[str, Any], key: str, what: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    return dict(_expect_object(value, f"{what}.{key}"))


@dataclass
class ConfigQueue:
    """Worker queue settings of a plugin."""

    queue: str = ""
    soft_time_limit: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "ConfigQueue":
        if data is None:
            return cls()
        data = _expect_object(data, "config")
        return cls(
            queue=_str(data, "queue", "config"),
            soft_time_limit=_int(data, "soft_time_limit", "config"),
        )


@dataclass
class Verification:
    """Whether a plugin has every secret it needs configured."""

    configured: bool = False
    details: str = ""
    missing_secrets: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Verification":
        if data is None:
            return cls()
        data = _expect_object(data, "verification")
        return cls(
            configured=_bool(data, "configured", "verification"),
            details=_str(data, "details", "verification"),
            missing_secrets=_str_list(data, "missing_secrets", "verification"),
        )


@dataclass
class BaseConfiguration:
    """Fields shared by every plugin configuration kind (analyzers, connectors, ...)."""

    name: str = ""
    python_module: str = ""
    description: str = ""
    disabled: bool = False
    config: ConfigQueue = field(default_factory=ConfigQueue)
    secrets: dict[str, Any] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    verification: Verification = field(default_factory=Verification)

    @staticmethod
    def _base_fields(data: dict[str, Any], what: str) -> dict[str, Any]:
        return {
            "name": _str(data, "name", what),
            "python_module": _str(data, "python_module", what),
            "description": _str(data, "description", what),
            "disabled": _bool(data, "disabled", what),
            "config": ConfigQueue.from_dict(data.get("config")),
            "secrets": _object(data, "secrets", what),
            "params": _object(data, "params", what),
            "verification": Verification.from_dict(data.get("verification")),
        }


@dataclass
class AnalyzerConfig(BaseConfiguration):
    """How an analyzer is configured on the IntelX instance.

    Docs: https://intelx.readthedocs.io/en/latest/Usage.html#analyzers-customization
    """

    type: str = ""
    external_service: bool = False
    leaks_info: bool = False
    docker_based: bool = False
    run_hash: bool = False
    run_hash_type: str = ""
    supported_filetypes: list[str] = field(default_factory=list)
    not_supported_filetypes: list[str] = field(default_factory=list)
    observable_supported: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, what: str = "analyzer") -> "AnalyzerConfig":
        data = _expect_object(data, what)
        return cls(
            **cls._base_fields(data, what),
            type=_str(data, "type", what),
            external_service=_bool(data, "external_service", what),
            leaks_info=_bool(data, "leaks_info", what),
            docker_based=_bool(data, "docker_based", what),
            run_hash=_bool(data, "run_hash", what),
            run_hash_type=_str(data, "run_hash_type", what),
            supported_filetypes=_str_list(data, "supported_filetypes", what),
            not_supported_filetypes=_str_list(data, "not_supported_filetypes", what),
            observable_supported=_str_list(data, "observable_supported", what),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "name": self.name,
            "type": self.type,
            "python_module": self.python_module,
            "description": self.description,
            "disabled": self.disabled,
            "external_service": self.external_service,
            "leaks_info": self.leaks_info,
            "docker_based": self.docker_based,
            "run_hash": self.run_hash,
            "run_hash_type": self.run_hash_type,
            "supported_filetypes": self.supported_filetypes,
            "not_supported_filetypes": self.not_supported_filetypes,
            "observable_supported": self.observable_supported,
            "config": {
                "queue": self.config.queue,
                "soft_time_limit": self.config.soft_time_limit,
            },
            "secrets": self.secrets,
            "params": self.params,
            "verification": {
                "configured": self.verification.configured,
                "details": self.verification.details,
                "missing_secrets": self.verification.missing_secrets,
            },
        }


@dataclass
class StatusResponse:
    """Outcome of a health check."""

    status: bool

    @classmethod
    def from_dict(cls, data: Any) -> "StatusResponse":
        data = _expect_object(data, "status response")
        # An undetermined health check is an error, not a down analyzer.
        if "status" not in data:
            raise DecodeError("status response: missing 'status' field")
        value = data["status"]
        if not isinstance(value, bool):
            raise DecodeError(f"status response.status: expected boolean, got {type(value).__name__}")
        return cls(status=value)
