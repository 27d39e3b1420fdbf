"""
Demo web application protecting a login form with the Duo Universal Prompt.

You'll need to set DUO_CLIENT_ID, DUO_CLIENT_SECRET and DUO_API_HOST (a .env
file works). DUO_REDIRECT_URL defaults to http://localhost:8080/duo-callback.
Set DUO_FAILMODE=open to let users in without 2FA when Duo is unreachable.

Run with: python -m duo_universal.examples.demo
"""

import html
import json
import logging
import os
import secrets

import uvicorn
from dotenv import load_dotenv
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, RedirectResponse, Response
from starlette.routing import Route

from duo_universal.client import Client
from duo_universal.models.errors import DuoError

logger = logging.getLogger(__name__)

LOGIN_FORM = """<!doctype html>
<html>
  <body>
    <p>{message}</p>
    <form method="post" action="/">
      <input name="username" placeholder="username">
      <input name="password" type="password" placeholder="password">
      <button type="submit">Log in</button>
    </form>
  </body>
</html>
"""

SUCCESS_PAGE = """<!doctype html>
<html>
  <body>
    <h1>Auth Response</h1>
    <pre>{message}</pre>
  </body>
</html>
"""


def render_login(message: str, status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(
        LOGIN_FORM.format(message=html.escape(message)), status_code=status_code
    )


def create_app(
    duo_client: Client,
    failmode: str = "closed",
    session_secret: str | None = None,
) -> Starlette:
    """Build the demo app around an existing Duo client."""

    async def login_page(request: Request) -> Response:
        return render_login("This is a demo")

    async def login(request: Request) -> Response:
        form = await request.form()
        username = form.get("username")
        password = form.get("password")

        if not username or not password:
            return render_login("Missing username or password")

        # Password check goes here in a real application

        try:
            await duo_client.health_check()
        except DuoError as e:
            logger.error(f"Duo health check failed: {e}")
            if failmode.lower() == "open":
                return render_login(
                    "Login 'Successful', but 2FA Not Performed. "
                    "Confirm Duo client/secret/host values are correct"
                )
            return render_login(
                "2FA Unavailable. Confirm Duo client/secret/host values are correct"
            )

        state = duo_client.generate_state()
        request.session["duo"] = {"state": state, "username": username}
        auth_url = duo_client.create_auth_url(username, state)

        return RedirectResponse(auth_url, status_code=302)

    async def duo_callback(request: Request) -> Response:
        duo_code = request.query_params.get("duo_code")
        state = request.query_params.get("state")

        if not duo_code:
            return render_login("Missing 'duo_code' query parameters", 400)
        if not state:
            return render_login("Missing 'state' query parameters", 400)

        saved = request.session.pop("duo", None) or {}
        saved_state = saved.get("state")
        saved_username = saved.get("username")
        request.session.clear()

        if not saved_state or not saved_username:
            return render_login("Missing user session information", 400)

        if not secrets.compare_digest(state.encode(), saved_state.encode()):
            return render_login("Duo state does not match saved state", 400)

        try:
            decoded_token = await duo_client.exchange_authorization_code_for_2fa_result(
                duo_code, saved_username
            )
        except DuoError as e:
            logger.error(f"Duo code exchange failed: {e}")
            return render_login(
                "Error decoding Duo result. Confirm device clock is correct.", 400
            )

        return HTMLResponse(
            SUCCESS_PAGE.format(
                message=html.escape(json.dumps(decoded_token, indent=2, sort_keys=True))
            )
        )

    return Starlette(
        routes=[
            Route("/", login_page, methods=["GET"]),
            Route("/", login, methods=["POST"]),
            Route("/duo-callback", duo_callback, methods=["GET"]),
        ],
        middleware=[
            Middleware(
                SessionMiddleware,
                secret_key=session_secret or secrets.token_urlsafe(32),
            )
        ],
    )


def main():
    load_dotenv()
    logging.basicConfig(level=logging.INFO)

    duo_client = Client(
        client_id=os.getenv("DUO_CLIENT_ID", ""),
        client_secret=os.getenv("DUO_CLIENT_SECRET", ""),
        api_host=os.getenv("DUO_API_HOST", ""),
        redirect_url=os.getenv(
            "DUO_REDIRECT_URL", "http://localhost:8080/duo-callback"
        ),
    )
    app = create_app(
        duo_client,
        failmode=os.getenv("DUO_FAILMODE", "closed"),
        session_secret=os.getenv("SESSION_SECRET"),
    )

    uvicorn.run(
        app,
        host=os.getenv("DEMO_HOST", "localhost"),
        port=int(os.getenv("DEMO_PORT", "8080")),
        log_level="info",
    )


if __name__ == "__main__":
    main()
