"""OAuth helpers: authorization, token exchange and refresh."""
import logging
import os
import ssl
import subprocess
import tempfile
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlparse

import requests

from ..config import Config, get_env_var, save_config
from ..errors import ApiError, ConfigError, DecodeError, FreshtimeError
from .client import HttpClient, TokenProvider, api_base_url

logger = logging.getLogger(__name__)

AUTH_ENDPOINT = "https://auth.freshbooks.com/service/auth/oauth/authorize"
TOKEN_PATH = "/auth/oauth/token"
CALLBACK_PORT = 8457
REDIRECT_URI = f"https://localhost:{CALLBACK_PORT}/callback"


class OAuthApp:
    """Client id and secret of the registered FreshBooks application."""

    def __init__(self, client_id: str, client_secret: str):
        self.client_id = client_id
        self.client_secret = client_secret

    @classmethod
    def from_env(cls) -> "OAuthApp":
        """Read FRESHBOOKS_CLIENT_ID and FRESHBOOKS_CLIENT_SECRET.

        Raises:
            ConfigError: If either is missing
        """
        return cls(get_env_var("FRESHBOOKS_CLIENT_ID"), get_env_var("FRESHBOOKS_CLIENT_SECRET"))


def build_auth_url(app: OAuthApp) -> str:
    params = {
        "client_id": app.client_id,
        "response_type": "code",
        "redirect_uri": REDIRECT_URI,
    }
    return f"{AUTH_ENDPOINT}?{urlencode(params)}"

def _token_request(payload: Dict[str, Any], session: Optional[requests.Session] = None) -> Tuple[str, str]:
    http = session or requests
    try:
        resp = http.post(f"{api_base_url()}{TOKEN_PATH}", json=payload, timeout=30)
    except requests.RequestException as e:
        raise ApiError(0, "Network Error", str(e)) from e

    if resp.status_code != 200:
        raise ApiError(resp.status_code, resp.reason or "", resp.text)
    try:
        data = resp.json()
        return data["access_token"], data.get("refresh_token") or ""
    except (ValueError, KeyError, TypeError) as e:
        raise DecodeError(f"Unexpected token response: {e}") from e

def exchange_code_for_token(app: OAuthApp, code: str,
                            session: Optional[requests.Session] = None) -> Tuple[str, str]:
    """Exchange an authorization code for access and refresh tokens."""
    payload = {
        "grant_type": "authorization_code",
        "client_id": app.client_id,
        "client_secret": app.client_secret,
        "code": code,
        "redirect_uri": REDIRECT_URI,
    }
    return _token_request(payload, session)

def refresh_access_token(app: OAuthApp, refresh_token: str,
                         session: Optional[requests.Session] = None) -> Tuple[str, str]:
    """Exchange a refresh token for a new access/refresh token pair."""
    payload = {
        "grant_type": "refresh_token",
        "client_id": app.client_id,
        "client_secret": app.client_secret,
        "refresh_token": refresh_token,
    }
    return _token_request(payload, session)


class ConfigTokenProvider(TokenProvider):
    """Token provider backed by the user config.

    A refresh exchanges the stored refresh token and saves the rotated pair
    before the new access token is handed back.
    """

    def __init__(self, config: Config, app: Optional[OAuthApp] = None,
                 config_path: Optional[str] = None):
        super().__init__(config.access_token, on_refresh=self._refresh_from_config)
        self.config = config
        self._app = app
        self._config_path = config_path

    def _refresh_from_config(self) -> str:
        if not self.config.refresh_token:
            raise ConfigError("No refresh token available. Run `freshtime setup` to re-authenticate.")
        app = self._app or OAuthApp.from_env()
        access_token, refresh_token = refresh_access_token(app, self.config.refresh_token)
        self.config.access_token = access_token
        self.config.refresh_token = refresh_token or self.config.refresh_token
        save_config(self.config, self._config_path)
        logger.info("Refreshed access token and saved config")
        return access_token


def client_for_config(config: Config, **kwargs) -> HttpClient:
    """HttpClient that refreshes and persists tokens on a 401."""
    return HttpClient(ConfigTokenProvider(config), **kwargs)


# --- Local callback server ---
class _AuthHandler(BaseHTTPRequestHandler):
    server: HTTPServer  # type: ignore[assignment]

    def do_GET(self) -> None:  # noqa: N802
        parsed = urlparse(self.path)
        if parsed.path != "/callback":
            self.send_error(404, "Not found")
            return
        code = parse_qs(parsed.query).get("code", [None])[0]
        self.server.auth_code = code or ""  # type: ignore[attr-defined]
        if not code:
            self.send_error(400, "Error: no code received. Close this tab and try again.")
            return
        self.send_response(200)
        self.send_header("Content-Type", "text/html")
        self.end_headers()
        self.wfile.write(b"<html><body><h1>Done! You can close this tab.</h1></body></html>")

    def log_message(self, fmt: str, *args: Any) -> None:
        logger.debug("callback server: " + fmt, *args)


def _self_signed_context(workdir: str) -> ssl.SSLContext:
    cert = os.path.join(workdir, "cert.pem")
    key = os.path.join(workdir, "key.pem")
    try:
        subprocess.run(
            ["openssl", "req", "-x509", "-newkey", "rsa:2048", "-keyout", key, "-out", cert,
             "-days", "1", "-nodes", "-subj", "/CN=localhost"],
            check=True, capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise FreshtimeError(f"Failed to generate self-signed certificate: {e}") from e
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(cert, key)
    return context

def wait_for_auth_code(port: int = CALLBACK_PORT) -> str:
    """Serve the OAuth redirect over HTTPS until a request carrying a code arrives.

    Raises:
        FreshtimeError: If the server cannot start or the redirect has no code
    """
    with tempfile.TemporaryDirectory() as workdir:
        context = _self_signed_context(workdir)
        try:
            server = HTTPServer(("127.0.0.1", port), _AuthHandler)
        except OSError as e:
            raise FreshtimeError(f"Failed to listen on :{port}: {e}") from e
        server.socket = context.wrap_socket(server.socket, server_side=True)
        server.auth_code = None  # type: ignore[attr-defined]
        try:
            # Favicon and other stray requests do not end the wait
            while server.auth_code is None:  # type: ignore[attr-defined]
                server.handle_request()
        finally:
            server.server_close()
    code = server.auth_code  # type: ignore[attr-defined]
    if not code:
        raise FreshtimeError("No authorization code received.")
    return code
