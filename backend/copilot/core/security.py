from typing import Optional

from fastapi import Depends, Header, HTTPException

from copilot.core.config import Settings, get_settings


def verify_api_key(
    x_api_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
):
    # No key configured → open service
    if not settings.API_KEY:
        return None

    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return x_api_key
