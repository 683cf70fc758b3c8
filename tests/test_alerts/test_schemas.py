"""Tests for the Alert record."""

from datetime import datetime, timezone

import pytest

from trustlens.alerts.schemas import Alert


def _make_alert(**overrides) -> Alert:
    defaults = dict(
        alert_type="low_trust_score",
        target_type="user",
        target_id="u-1",
        severity="high",
        title="Low trust score",
        description="Trust score 22 is below 30",
    )
    defaults.update(overrides)
    return Alert(**defaults)


class TestValidation:
    def test_defaults(self):
        alert = _make_alert()
        assert alert.status == "active"
        assert alert.data == {}
        assert len(alert.alert_id) == 36
        assert alert.target == "user:u-1"

    @pytest.mark.parametrize("field,value", [
        ("alert_type", "volume_surge"),
        ("target_type", "theme"),
        ("severity", "warning"),
        ("status", "acknowledged"),
    ])
    def test_rejects_unknown_values(self, field, value):
        with pytest.raises(ValueError, match=f"Invalid {field}"):
            _make_alert(**{field: value})


class TestSerialization:
    def test_to_dict(self):
        created = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        alert = _make_alert(data={"trust_score": 22}, created_at=created)

        data = alert.to_dict()

        assert data["alert_type"] == "low_trust_score"
        assert data["data"] == {"trust_score": 22}
        assert data["created_at"] == "2026-03-01T09:30:00+00:00"

    def test_from_dict_parses_strings(self):
        alert = Alert.from_dict({
            "alert_id": "a-1",
            "alert_type": "fake_review",
            "target_type": "review",
            "target_id": "r-1",
            "severity": "critical",
            "title": "Fake review detected",
            "description": "Review r-1 judged fake with score 12",
            "data": '{"score": 12}',
            "created_at": "2026-03-01T09:30:00+00:00",
        })

        assert alert.data == {"score": 12}
        assert alert.created_at.tzinfo is not None
        assert alert.status == "active"
