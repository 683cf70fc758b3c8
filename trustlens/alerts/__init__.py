"""Alerting on suspicious actors and fake reviews."""

from trustlens.alerts.config import AlertConfig
from trustlens.alerts.repository import AlertRepository
from trustlens.alerts.schemas import Alert
from trustlens.alerts.service import AlertEmitter

__all__ = ["Alert", "AlertConfig", "AlertEmitter", "AlertRepository"]
