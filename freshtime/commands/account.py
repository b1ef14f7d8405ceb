"""The setup and refresh commands."""
import logging
from typing import Optional

from ..api import resources
from ..api.auth import (
    ConfigTokenProvider, OAuthApp, build_auth_url, exchange_code_for_token, wait_for_auth_code,
)
from ..api.client import HttpClient, TokenProvider
from ..config import Config, config_path, load_config, save_config
from ..errors import ConfigError

logger = logging.getLogger(__name__)

def run_setup(code: Optional[str] = None, app: Optional[OAuthApp] = None) -> Config:
    """Authorize with FreshBooks and write the user config.

    Client rates and the default currency of an existing config are kept.

    Args:
        code: Authorization code, skips the local callback server (optional)
        app: OAuth app credentials (default: from the environment)

    Returns:
        The saved config
    """
    app = app or OAuthApp.from_env()
    if not code:
        print("Open this URL in your browser to authorize freshtime:")
        print()
        print(f"  {build_auth_url(app)}")
        print()
        print("Waiting for the redirect (accept the self-signed certificate warning)...")
        code = wait_for_auth_code()

    print("Exchanging code for token...")
    access_token, refresh_token = exchange_code_for_token(app, code)

    print("Verifying token...")
    identity = resources.get_identity(HttpClient(TokenProvider(access_token)))

    try:
        existing = load_config()
    except ConfigError:
        existing = None
    config = Config(
        access_token=access_token,
        account_id=identity.account_id,
        business_id=identity.business_id,
        refresh_token=refresh_token,
        client_rates=existing.client_rates if existing else None,
        default_currency=existing.default_currency if existing else None,
    )
    save_config(config)

    print()
    print(f"Account:  {config.account_id}")
    print(f"Business: {config.business_id}")
    print(f"Config:   {config_path()}")
    return config

def run_refresh(config: Optional[Config] = None, app: Optional[OAuthApp] = None) -> Config:
    """Exchange the stored refresh token for a new token pair."""
    config = config or load_config()
    if not config.refresh_token:
        raise ConfigError("No refresh token in config. Run `freshtime setup` first.")
    ConfigTokenProvider(config, app=app).refresh()
    logger.debug("Access token refreshed")
    return config
