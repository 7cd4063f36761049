"""
Notifications feature: device registration for reminder delivery.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from rememberly.core.dependencies import get_session
from rememberly.core.session import AppSession
from rememberly.features.reminders.schemas import PushTokenRequest

router = APIRouter()


@router.post("/register")
async def register_device(data: PushTokenRequest, session: AppSession = Depends(get_session)):
    """Register the device push token notifications are sent to."""
    granted = await session.reminders.register_push_token(data.push_token)
    if not granted:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Notifications are required for reminders to work",
        )
    return {"message": "Notifications enabled", "platform": session.reminders.notifier.name}
