from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_PURCHASE_AMOUNT = 5
MIN_PURCHASE_AMOUNT = 1
MAX_PURCHASE_AMOUNT = 5


class Settings(BaseSettings):
    """Action configuration read from the workflow environment."""

    app_name: str = Field(default="lotto-action")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s %(levelname)s %(name)s %(message)s")

    # Action inputs, exposed by the runner as INPUT_<NAME>
    lotto_id: str = Field(default="", validation_alias=AliasChoices("lotto_id", "INPUT_LOTTO-ID"))
    lotto_password: str = Field(
        default="", validation_alias=AliasChoices("lotto_password", "INPUT_LOTTO-PASSWORD")
    )
    purchase_amount: str = Field(
        default=str(DEFAULT_PURCHASE_AMOUNT),
        validation_alias=AliasChoices("purchase_amount", "INPUT_LOTTO-PURCHASE-AMOUNT"),
    )

    # Ticket store configuration
    github_token: str = Field(
        default="", validation_alias=AliasChoices("github_token", "INPUT_GITHUB-TOKEN", "GITHUB_TOKEN")
    )
    github_repository: str = Field(
        default="", validation_alias=AliasChoices("github_repository", "GITHUB_REPOSITORY")
    )
    github_api_url: str = Field(
        default="https://api.github.com", validation_alias=AliasChoices("github_api_url", "GITHUB_API_URL")
    )

    # Automation session configuration
    timezone: str = Field(default="Asia/Seoul")
    browser_driver: str = Field(default="chromium")
    browser_headless: bool = Field(default=True)
    browser_args: tuple[str, ...] = Field(default=("--no-sandbox",))
    install_browser: bool = Field(default=True, validation_alias=AliasChoices("install_browser", "LOTTO_INSTALL_BROWSER"))

    # Observability configuration
    otel_enabled: bool = Field(default=False)
    otel_service_name: str = Field(default="lotto-action")
    otel_exporter_otlp_endpoint: str | None = Field(default=None)
    otel_exporter_otlp_headers: str | None = Field(default=None)

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def has_credentials(self) -> bool:
        return self.lotto_id != "" and self.lotto_password != ""


def clamp_purchase_amount(raw: str | int | None) -> int:
    """Parse the requested ticket count, falling back to the default and clamping to 1-5."""

    try:
        amount = int(str(raw).strip())
    except (TypeError, ValueError):
        amount = DEFAULT_PURCHASE_AMOUNT
    return max(MIN_PURCHASE_AMOUNT, min(amount, MAX_PURCHASE_AMOUNT))


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the action settings."""

    return Settings()
