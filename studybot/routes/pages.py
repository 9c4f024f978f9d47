from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from studybot.core.config import Settings
from studybot.core.errors import AuthError
from studybot.routes.deps import get_app_settings, get_auth, get_chat_session
from studybot.services.auth_service import AuthSession, SupabaseAuth
from studybot.services.chat_session import ChatSession
from studybot.services.markdown_service import render_markdown

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))
templates.env.filters["markdown"] = render_markdown

router = APIRouter()


def _redirect(url: str) -> RedirectResponse:
    # 303 so a POST form submit turns into a GET of the target page
    return RedirectResponse(url, status_code=303)


def _login_redirect(settings: Settings) -> RedirectResponse:
    resp = _redirect("/login")
    resp.delete_cookie(settings.SESSION_COOKIE_NAME)
    return resp


def _start_session(session: AuthSession, settings: Settings) -> RedirectResponse:
    resp = _redirect("/chat")
    resp.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session.access_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    return resp


def _render_chat(request: Request, chat: ChatSession, input_text: str = "") -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "chat.html",
        {
            "messages": chat.messages,
            "error": chat.error,
            "notice": chat.notice,
            "sending": chat.is_sending,
            "input_text": input_text,
        },
    )


@router.get("/", response_class=HTMLResponse)
def landing(request: Request):
    return templates.TemplateResponse(request, "landing.html")


# ---- auth views ----

@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return templates.TemplateResponse(request, "auth.html", {"mode": "login", "email": ""})


@router.post("/login", response_class=HTMLResponse)
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    auth: SupabaseAuth = Depends(get_auth),
    settings: Settings = Depends(get_app_settings),
):
    try:
        session = await auth.sign_in_with_password(email, password)
    except AuthError as e:
        return templates.TemplateResponse(
            request, "auth.html", {"mode": "login", "email": email, "error": e.message}
        )
    return _start_session(session, settings)


@router.get("/signup", response_class=HTMLResponse)
def signup_form(request: Request):
    return templates.TemplateResponse(request, "auth.html", {"mode": "signup", "email": ""})


@router.post("/signup", response_class=HTMLResponse)
async def signup(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    auth: SupabaseAuth = Depends(get_auth),
    settings: Settings = Depends(get_app_settings),
):
    try:
        session = await auth.sign_up(email, password, redirect_to=settings.signup_redirect_url)
    except AuthError as e:
        return templates.TemplateResponse(
            request, "auth.html", {"mode": "signup", "email": email, "error": e.message}
        )
    if session is None:
        # confirmation email pending; /chat bounces to /login until then
        return _redirect("/chat")
    return _start_session(session, settings)


# ---- chat view ----

@router.get("/chat", response_class=HTMLResponse)
async def chat_page(
    request: Request,
    chat: ChatSession = Depends(get_chat_session),
    settings: Settings = Depends(get_app_settings),
):
    await chat.load()
    if chat.needs_login:
        return _login_redirect(settings)
    return _render_chat(request, chat)


@router.post("/chat/send", response_class=HTMLResponse)
async def chat_send(
    request: Request,
    message: str = Form(""),
    chat: ChatSession = Depends(get_chat_session),
    settings: Settings = Depends(get_app_settings),
):
    await chat.load()
    if chat.needs_login:
        return _login_redirect(settings)
    if not message.strip():
        return _render_chat(request, chat, input_text=message)
    await chat.send(message)
    return _render_chat(request, chat)


@router.post("/chat/reset", response_class=HTMLResponse)
async def chat_reset(
    request: Request,
    chat: ChatSession = Depends(get_chat_session),
    settings: Settings = Depends(get_app_settings),
):
    await chat.load()
    if chat.needs_login:
        return _login_redirect(settings)
    await chat.reset()
    return _render_chat(request, chat)


@router.post("/chat/save", response_class=HTMLResponse)
async def chat_save(
    request: Request,
    chat: ChatSession = Depends(get_chat_session),
    settings: Settings = Depends(get_app_settings),
):
    await chat.load()
    if chat.needs_login:
        return _login_redirect(settings)
    await chat.save()
    return _render_chat(request, chat)


@router.post("/chat/logout")
async def chat_logout(
    chat: ChatSession = Depends(get_chat_session),
    settings: Settings = Depends(get_app_settings),
):
    await chat.logout()
    return _login_redirect(settings)
