"""
Server-rendered pages.

The dashboard is guarded by the session gate: signed-out visitors are
redirected to the login page before anything else happens, signed-in users
get the dashboard for their role. The email-confirmation page is static.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ...core.accounts.gate import GateDecision, GateState
from ...core.media.avatar import AvatarRenderer, AvatarSize
from ..dependencies import AccessTokenDep, SessionGateDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

DASHBOARD_TEMPLATES = {
    GateState.STUDENT: "dashboard_student.html",
    GateState.TEACHER: "dashboard_teacher.html",
}


def _display_name(decision: GateDecision) -> str | None:
    if decision.profile and decision.profile.full_name:
        return decision.profile.full_name
    return decision.user.email if decision.user else None


@router.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
async def dashboard(
    request: Request,
    gate: SessionGateDep,
    access_token: AccessTokenDep,
    settings: SettingsDep,
):
    decision = await gate.check(access_token)

    if not decision.is_authenticated:
        return RedirectResponse(decision.redirect_to, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    name = _display_name(decision)
    avatar = AvatarRenderer(
        src=decision.profile.avatar_url if decision.profile else None,
        name=name,
        size=AvatarSize.LG,
        base_url=settings.supabase_url,
    )

    logger.info(
        "Rendering dashboard",
        extra={"user_id": decision.user.id, "view": decision.state.value}
    )

    return templates.TemplateResponse(
        request,
        DASHBOARD_TEMPLATES[decision.state],
        {
            "display_name": name or "there",
            "avatar": avatar.render(),
        },
    )


@router.get("/register/confirm-email", response_class=HTMLResponse, include_in_schema=False)
async def confirm_email(request: Request):
    return templates.TemplateResponse(request, "confirm_email.html", {})
