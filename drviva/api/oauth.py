"""
OAuth callback for the Drive integration - exchanges the authorization code
returned by Google for tokens
"""
import logging

import httpx
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from drviva.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/callback")
async def oauth_callback(code: str = Query("")):
    if not code:
        return JSONResponse({"error": "Missing code"}, status_code=400)

    settings = get_settings()
    if not settings.GOOGLE_CLIENT_ID or not settings.GOOGLE_CLIENT_SECRET:
        return JSONResponse({"error": "Missing Google OAuth credentials"}, status_code=500)

    form = {
        "code": code,
        "client_id": settings.GOOGLE_CLIENT_ID,
        "client_secret": settings.GOOGLE_CLIENT_SECRET,
        "redirect_uri": settings.GOOGLE_REDIRECT_URI,
        "grant_type": "authorization_code",
    }

    try:
        async with httpx.AsyncClient(timeout=15.0) as client:
            response = await client.post(settings.GOOGLE_TOKEN_URL, data=form)
    except httpx.HTTPError as e:
        logger.error(f"OAuth token exchange failed: {e}")
        return JSONResponse({"error": "Failed to exchange code", "details": str(e)}, status_code=500)

    if response.status_code >= 400:
        logger.warning(f"OAuth token endpoint returned {response.status_code}")
        return JSONResponse(
            {"error": "Failed to exchange code", "details": response.text},
            status_code=500,
        )

    # Tokens go straight back to the client; nothing is stored server-side
    return JSONResponse(response.json())
