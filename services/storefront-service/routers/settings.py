"""Store settings API router."""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from auth import verify_token
from config import STORE_SETTINGS_SCOPE
from database import get_db
from dependencies import get_settings_service
from schemas import SettingsResponse, SettingsUpdateResponse, StoreSettings
from services.payment_methods import public_settings
from services.settings_service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings", response_model=SettingsResponse)
def get_store_settings(
    db: Session = Depends(get_db),
    token: str = Depends(verify_token),
    settings_service: SettingsService = Depends(get_settings_service)
):
    """Get the full store settings document - requires authentication."""
    try:
        return {"settings": settings_service.get_settings(db, STORE_SETTINGS_SCOPE)}
    except Exception:
        logger.exception("Error fetching settings")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/settings", response_model=SettingsUpdateResponse)
def update_store_settings(
    body: Any = Body(None),
    db: Session = Depends(get_db),
    token: str = Depends(verify_token),
    settings_service: SettingsService = Depends(get_settings_service)
):
    """Replace the store settings document - requires authentication."""
    settings = body.get("settings") if isinstance(body, dict) else None
    if not isinstance(settings, dict):
        raise HTTPException(status_code=400, detail="Invalid settings payload")

    try:
        StoreSettings.model_validate(settings)
    except ValidationError as e:
        logger.warning("Rejected malformed settings", extra={
            "errors": e.error_count()
        })
        raise HTTPException(status_code=400, detail="Invalid payment method settings")

    try:
        saved = settings_service.update_settings(db, STORE_SETTINGS_SCOPE, settings)
    except Exception:
        logger.exception("Error updating settings")
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"message": "Settings updated", "settings": saved}


@router.get("/public-settings")
def get_public_settings(
    db: Session = Depends(get_db),
    settings_service: SettingsService = Depends(get_settings_service)
):
    """Payment options a checkout page may show. Public."""
    try:
        settings = settings_service.get_settings(db, STORE_SETTINGS_SCOPE)
        return {"settings": public_settings(settings)}
    except Exception:
        logger.exception("Error fetching public settings")
        raise HTTPException(status_code=500, detail="Internal server error")
