"""Tests for trust_bot.models"""

from datetime import datetime, timezone

import pytest

from trust_bot.errors import ParseError
from trust_bot.models import (
    STATUS_IMAGE_MAP,
    InstanceRecord,
    MetricRow,
    StatusCategory,
    StatusReport,
)


def _instance_payload(**overrides):
    payload = {
        "key": "NA1",
        "releaseVersion": "Spring '24 Patch 10.4",
        "Incidents": [
            {
                "IncidentImpacts": [
                    {
                        "type": "serviceDisruption",
                        "severity": "major",
                        "startTime": "2024-03-01T10:00:00.000Z",
                        "endTime": None,
                    }
                ],
                "message": {"rootCause": "Database failover"},
                "serviceKeys": ["core", "api"],
                "updatedAt": "2024-03-01T11:00:00.000Z",
            }
        ],
        "Maintenances": [
            {
                "name": "Major release upgrade",
                "plannedStartTime": "2024-03-02T02:00:00.000Z",
                "plannedEndTime": "2024-03-02T06:00:00.000Z",
                "message": {"availability": "unavailable"},
                "updatedAt": "2024-02-20T00:00:00.000Z",
            }
        ],
    }
    payload.update(overrides)
    return payload


class TestStatusImageMap:
    def test_every_category_has_image(self):
        assert set(STATUS_IMAGE_MAP) == set(StatusCategory)

    def test_image_url(self):
        assert STATUS_IMAGE_MAP[StatusCategory.HEALTHY_MAINTENANCE] == (
            "https://trust.salesforce.com/static/images/user_guide/Healthy_Maintenance@2x.png"
        )

    def test_map_is_read_only(self):
        with pytest.raises(TypeError):
            STATUS_IMAGE_MAP[StatusCategory.HEALTHY] = "x"

    def test_report_thumb_url(self):
        report = StatusReport(category=StatusCategory.DISRUPTION, text="t", fallback="f")
        assert report.thumb_url.endswith("/Disruption@2x.png")


class TestInstanceRecord:
    def test_from_dict(self):
        record = InstanceRecord.from_dict(_instance_payload())

        assert record.key == "NA1"
        assert record.release_version == "Spring '24 Patch 10.4"
        assert len(record.incidents) == 1
        assert len(record.maintenances) == 1

        incident = record.incidents[0]
        assert incident.root_cause == "Database failover"
        assert incident.service_keys == ["core", "api"]
        assert incident.updated_at == datetime(2024, 3, 1, 11, tzinfo=timezone.utc)

        impact = incident.impacts[0]
        assert impact.type == "serviceDisruption"
        assert impact.severity == "major"
        assert impact.end_time is None

        maint = record.maintenances[0]
        assert maint.name == "Major release upgrade"
        assert maint.availability == "unavailable"
        assert maint.planned_end_time == datetime(2024, 3, 2, 6, tzinfo=timezone.utc)

    def test_missing_lists_are_empty(self):
        record = InstanceRecord.from_dict({"key": "NA1"})
        assert record.incidents == []
        assert record.maintenances == []
        assert record.release_version is None

    def test_null_lists_are_empty(self):
        record = InstanceRecord.from_dict({"key": "NA1", "Incidents": None, "Maintenances": None})
        assert record.incidents == []
        assert record.maintenances == []

    def test_missing_key_raises(self):
        with pytest.raises(ParseError, match="key"):
            InstanceRecord.from_dict({"Incidents": []})

    def test_not_an_object_raises(self):
        with pytest.raises(ParseError):
            InstanceRecord.from_dict(["NA1"])

    def test_bad_timestamp_raises(self):
        payload = _instance_payload()
        payload["Incidents"][0]["updatedAt"] = "yesterday"
        with pytest.raises(ParseError, match="updatedAt"):
            InstanceRecord.from_dict(payload)

    def test_non_object_message_raises(self):
        payload = _instance_payload()
        payload["Incidents"][0]["message"] = "oops"
        with pytest.raises(ParseError, match="message"):
            InstanceRecord.from_dict(payload)

    def test_non_object_maintenance_message_raises(self):
        payload = _instance_payload(Incidents=[])
        payload["Maintenances"][0]["message"] = ["unavailable"]
        with pytest.raises(ParseError, match="message"):
            InstanceRecord.from_dict(payload)

    def test_non_string_severity_raises(self):
        payload = _instance_payload()
        payload["Incidents"][0]["IncidentImpacts"][0]["severity"] = 3
        with pytest.raises(ParseError, match="severity"):
            InstanceRecord.from_dict(payload)

    def test_string_service_keys_raises(self):
        payload = _instance_payload()
        payload["Incidents"][0]["serviceKeys"] = "core"
        with pytest.raises(ParseError, match="serviceKeys"):
            InstanceRecord.from_dict(payload)

    def test_non_string_service_key_raises(self):
        payload = _instance_payload()
        payload["Incidents"][0]["serviceKeys"] = ["core", 7]
        with pytest.raises(ParseError, match="serviceKeys"):
            InstanceRecord.from_dict(payload)

    def test_non_list_incidents_raises(self):
        with pytest.raises(ParseError, match="Incidents"):
            InstanceRecord.from_dict({"key": "NA1", "Incidents": {"a": 1}})

    def test_null_root_cause(self):
        payload = _instance_payload()
        payload["Incidents"][0]["message"] = {"rootCause": None}
        record = InstanceRecord.from_dict(payload)
        assert record.incidents[0].root_cause is None


class TestMetricRow:
    def test_from_dict(self):
        row = MetricRow.from_dict({
            "metricValueName": "TransactionCount",
            "timestamp": "2024-03-01T00:00:00.000Z",
            "value": 5000000000,
        })
        assert row.name == "TransactionCount"
        assert row.value == 5000000000
        assert row.timestamp == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_zero_value_is_valid(self):
        row = MetricRow.from_dict({
            "metricValueName": "AvgTransactionSpeed",
            "timestamp": "2024-03-01T00:00:00.000Z",
            "value": 0,
        })
        assert row.value == 0

    def test_non_numeric_value_raises(self):
        with pytest.raises(ParseError):
            MetricRow.from_dict({
                "metricValueName": "TransactionCount",
                "timestamp": "2024-03-01T00:00:00.000Z",
                "value": "lots",
            })

    def test_missing_name_raises(self):
        with pytest.raises(ParseError, match="metricValueName"):
            MetricRow.from_dict({"timestamp": "2024-03-01T00:00:00.000Z", "value": 1})
