from __future__ import annotations
from fastapi import APIRouter, Request
from app.core.cookies import set_demo_cookie
from app.core.services.monitor import RenderContext
from app.core.templates import templates

router = APIRouter()

@router.get("/")
def home(request: Request):
    state = request.app.state
    ctx = RenderContext.select(state.failover.get(), state.primary, state.fallback)
    response = templates.TemplateResponse(
        request,
        "pages/home.html",
        {
            "app_name": state.settings.APP_NAME,
            "image_url": ctx.image_url,
            "style_url": ctx.style_url,
            "failover": ctx.failover,
        },
    )
    set_demo_cookie(response, state.settings)
    return response
