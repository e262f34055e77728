"""Settings storage service."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
from opentelemetry import trace

from models import Setting
from monitoring import settings_updates_counter

logger = logging.getLogger(__name__)


class SettingsService:
    """Read and write settings documents keyed by scope."""

    def __init__(self):
        self.tracer = trace.get_tracer(__name__)

    def get_settings(self, db: Session, scope: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the settings document for a scope.

        Args:
            db: Database session
            scope: Settings scope key, e.g. "store"

        Returns:
            The stored document, or None if nothing was saved yet
        """
        with self.tracer.start_as_current_span("db.query.get_settings") as db_span:
            db_span.set_attribute("db.operation", "SELECT")
            db_span.set_attribute("db.table", "settings")
            db_span.set_attribute("settings.scope", scope)

            setting = db.get(Setting, scope)

            db_span.set_attribute("db.rows_returned", 1 if setting else 0)

        return setting.value if setting else None

    def update_settings(self, db: Session, scope: str, value: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace the settings document for a scope, creating it if needed.

        Args:
            db: Database session
            scope: Settings scope key
            value: New settings document

        Returns:
            The stored document
        """
        with self.tracer.start_as_current_span("db.query.upsert_settings") as db_span:
            db_span.set_attribute("db.operation", "UPSERT")
            db_span.set_attribute("db.table", "settings")
            db_span.set_attribute("settings.scope", scope)

            setting = db.get(Setting, scope)
            if setting is None:
                setting = Setting(scope=scope, value=value)
                db.add(setting)
            else:
                setting.value = value
            db.commit()

        settings_updates_counter.add(1, {"scope": scope})
        logger.info("Settings updated", extra={
            "scope": scope,
            "keys": sorted(value)
        })
        return value
