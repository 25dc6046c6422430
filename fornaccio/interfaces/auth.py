import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse

from fornaccio.core.config import settings
from fornaccio.core.security import SESSION_COOKIE, sign_session, verify_admin_password
from fornaccio.core.templating import templates
from fornaccio.domain.errors import AuthenticationError
from fornaccio.domain.schemas import LoginRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


@router.post("/api/auth/login")
def login(payload: LoginRequest, response: Response):
    if not verify_admin_password(payload.password):
        logger.warning("🔒 Failed admin login attempt")
        raise AuthenticationError("Mot de passe incorrect")

    response.set_cookie(
        SESSION_COOKIE,
        sign_session(),
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return {"success": True}


@router.post("/api/auth/logout")
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE, path="/")
    return {"success": True}
