"""
Data model for the Trust status API.

Records are built fresh from API JSON for each command and never stored.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Optional

from .errors import ParseError
from .utils import parse_timestamp


class StatusCategory(str, Enum):
    """Display category for an instance, as shown on the Trust site."""

    HEALTHY = "Healthy"
    MAINTENANCE = "Maintenance"
    DISRUPTION = "Disruption"
    DEGRADATION = "Degradation"
    HEALTHY_DISRUPTION = "Healthy_Disruption"
    HEALTHY_DEGRADATION = "Healthy_Degradation"
    HEALTHY_MAINTENANCE = "Healthy_Maintenance"


_IMAGE_ROOT = "https://trust.salesforce.com/static/images/user_guide"

STATUS_IMAGE_MAP = MappingProxyType({
    category: f"{_IMAGE_ROOT}/{category.value}@2x.png" for category in StatusCategory
})


def _as_dict(data: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ParseError(f"{kind} record is not an object")
    return data


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    if data.get(key) is None:
        raise ParseError(f"{kind} record missing '{key}'")
    return data[key]


def _optional(data: Dict[str, Any], key: str, kind: str, expected: type) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, expected):
        raise ParseError(f"{kind} record has invalid '{key}': {value!r}")
    return value


def _timestamp(data: Dict[str, Any], key: str, kind: str) -> datetime:
    try:
        return parse_timestamp(_require(data, key, kind))
    except (TypeError, ValueError) as e:
        raise ParseError(f"{kind} record has invalid '{key}': {e}") from None


@dataclass
class IncidentImpact:
    type: str
    severity: str
    start_time: datetime
    end_time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IncidentImpact":
        data = _as_dict(data, "IncidentImpact")
        return cls(
            type=_require(data, "type", "IncidentImpact"),
            severity=_optional(data, "severity", "IncidentImpact", str) or "",
            start_time=_timestamp(data, "startTime", "IncidentImpact"),
            end_time=_timestamp(data, "endTime", "IncidentImpact") if data.get("endTime") else None,
        )


@dataclass
class Incident:
    impacts: List[IncidentImpact]
    updated_at: datetime
    root_cause: Optional[str] = None
    service_keys: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Incident":
        data = _as_dict(data, "Incident")
        message = _optional(data, "message", "Incident", dict) or {}
        service_keys = _optional(data, "serviceKeys", "Incident", list) or []
        if not all(isinstance(k, str) for k in service_keys):
            raise ParseError(f"Incident record has invalid 'serviceKeys': {service_keys!r}")
        impacts = _optional(data, "IncidentImpacts", "Incident", list) or []
        return cls(
            impacts=[IncidentImpact.from_dict(i) for i in impacts],
            updated_at=_timestamp(data, "updatedAt", "Incident"),
            root_cause=_optional(message, "rootCause", "Incident message", str),
            service_keys=list(service_keys),
        )


@dataclass
class Maintenance:
    name: str
    planned_start_time: datetime
    planned_end_time: datetime
    updated_at: datetime
    availability: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Maintenance":
        data = _as_dict(data, "Maintenance")
        message = _optional(data, "message", "Maintenance", dict) or {}
        return cls(
            name=_require(data, "name", "Maintenance"),
            planned_start_time=_timestamp(data, "plannedStartTime", "Maintenance"),
            planned_end_time=_timestamp(data, "plannedEndTime", "Maintenance"),
            updated_at=_timestamp(data, "updatedAt", "Maintenance"),
            availability=_optional(message, "availability", "Maintenance message", str),
        )


@dataclass
class InstanceRecord:
    """Status of one instance as returned by /instances/{key}/status."""

    key: str
    release_version: Optional[str] = None
    incidents: List[Incident] = field(default_factory=list)
    maintenances: List[Maintenance] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InstanceRecord":
        data = _as_dict(data, "Instance")
        return cls(
            key=_require(data, "key", "Instance"),
            release_version=data.get("releaseVersion"),
            incidents=[Incident.from_dict(i) for i in _optional(data, "Incidents", "Instance", list) or []],
            maintenances=[
                Maintenance.from_dict(m) for m in _optional(data, "Maintenances", "Instance", list) or []
            ],
        )


@dataclass
class MetricRow:
    name: str
    timestamp: datetime
    value: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetricRow":
        data = _as_dict(data, "MetricRow")
        value = _require(data, "value", "MetricRow")
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ParseError(f"MetricRow has non-numeric value: {value!r}")
        return cls(
            name=_require(data, "metricValueName", "MetricRow"),
            timestamp=_timestamp(data, "timestamp", "MetricRow"),
            value=value,
        )


@dataclass
class StatusReport:
    """Classifier result, ready to be turned into a Slack attachment."""

    category: StatusCategory
    text: str
    fallback: str
    footer: Optional[str] = None
    fields: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def thumb_url(self) -> str:
        return STATUS_IMAGE_MAP[self.category]


@dataclass
class MetricSeries:
    """Windowed, scaled samples of one metric."""

    name: str
    title: str
    label: str
    values: List[float] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
