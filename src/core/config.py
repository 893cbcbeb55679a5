"""Relay configuration using pydantic-settings."""
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserConfig(BaseModel):
    """Browser connection and action timeouts."""

    connect_retries: int = 1
    retry_delay: float = 2.0
    probe_timeout: float = 5.0
    navigation_timeout_ms: int = 30000
    click_timeout_ms: int = 5000
    action_timeout_ms: int = 10000


class FlowConfig(BaseModel):
    """Settle delays and fallback values for the scripted delivery flows."""

    pickup_settle_seconds: float = 0.8
    dropoff_settle_seconds: float = 1.2
    phone_settle_seconds: float = 0.3
    meet_settle_seconds: float = 0.5
    confirmation_wait_seconds: float = 30.0

    default_pickup: str = "241 18th St S, Arlington, VA"
    default_dropoff: str = "203 S Fillmore St, Arlington, VA"
    default_phone: str = "5713869946"
    default_recipient_phone: str = "7039793380"


class SelectorTable(BaseModel):
    """Selectors for the delivery site's page structure.

    Bump ``version`` whenever the site changes and the table is updated.
    """

    version: str = "uber-direct-2025.1"
    pickup_input: str = (
        '[data-testid="enhancer-container-pickup"] input[role="combobox"], '
        '[data-testid="enhancer-container-pickup"] input'
    )
    dropoff_input: str = (
        '[data-testid="enhancer-container-drop0"] input[role="combobox"], '
        '[data-testid="enhancer-container-drop0"] input'
    )
    search_button: str = 'button[aria-label="Search"]'
    product_option: str = 'li[data-testid="product_selector.list_item"]'
    courier_text: str = "Courier"
    phone_input: str = (
        '[data-baseweb="phone-input"] input, input[aria-label*="phone number"]'
    )
    meet_at_door: str = 'button[aria-label="Meet at door"]'
    request_delivery: str = (
        'button:has-text("Request delivery"), [aria-label="Request delivery"]'
    )
    # Element that only exists once the order is confirmed. Unset means a
    # fixed wait of confirmation_wait_seconds.
    confirmation_marker: Optional[str] = None


class Settings(BaseSettings):
    """Relay settings loaded from YAML, overridden by the environment."""

    model_config = SettingsConfigDict(env_nested_delimiter="__", extra="ignore")

    cdp_endpoint: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"
    serialize_commands: bool = False

    browser: BrowserConfig = BrowserConfig()
    flows: FlowConfig = FlowConfig()
    selectors: SelectorTable = SelectorTable()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment beats the YAML file so CDP_ENDPOINT=... always wins.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file.

        Args:
            path: Path to the YAML configuration file. A missing file
                yields the defaults.

        Returns:
            Settings instance with loaded configuration.
        """
        if not path.exists():
            return cls()
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)
