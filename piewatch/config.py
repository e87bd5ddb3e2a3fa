from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError

from .alerts.constants import (
    BUY_DIP_PCT,
    CASH_FLOW_ABS_LIMIT,
    CONSIDER_SKIM_PCT,
    DRIFT_MAX_PCT,
    LOOKBACK_HOURS,
    MOVE_ALERT_PCT,
)
from .errors import ConfigError

# Load .env from repo root for local development and scripts.
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=ENV_PATH)


@dataclass(frozen=True)
class Thresholds:
    drift_max_pct: float = DRIFT_MAX_PCT
    move_alert_pct: float = MOVE_ALERT_PCT
    buy_dip_pct: float = BUY_DIP_PCT
    consider_skim_pct: float = CONSIDER_SKIM_PCT
    cash_flow_abs_limit: float = CASH_FLOW_ABS_LIMIT
    lookback_hours: float = LOOKBACK_HOURS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)
    t212_base: str = Field(alias="T212_BASE")
    t212_api_key: str = Field(alias="T212_API_KEY")
    http_timeout_seconds: float = Field(default=30.0, alias="HTTP_TIMEOUT_SECONDS")
    transactions_page_limit: int = Field(default=50, alias="TRANSACTIONS_PAGE_LIMIT")
    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_user: str | None = Field(default=None, alias="SMTP_USER")
    smtp_pass: str | None = Field(default=None, alias="SMTP_PASS")
    email_from: str | None = Field(default=None, alias="EMAIL_FROM")
    email_to: str | None = Field(default=None, alias="EMAIL_TO")
    state_dir: str = Field(default="./data", alias="STATE_DIR")
    snapshots_path: str | None = Field(default=None, alias="SNAPSHOTS_PATH")
    ledger_path: str | None = Field(default=None, alias="LEDGER_PATH")
    pages_out_dir: str = Field(default="dist", alias="PAGES_OUT_DIR")
    drift_max_pct: float = Field(default=DRIFT_MAX_PCT, alias="DRIFT_MAX_PCT")
    move_alert_pct: float = Field(default=MOVE_ALERT_PCT, alias="MOVE_ALERT_PCT")
    buy_dip_pct: float = Field(default=BUY_DIP_PCT, alias="BUY_DIP_PCT")
    consider_skim_pct: float = Field(default=CONSIDER_SKIM_PCT, alias="CONSIDER_SKIM_PCT")
    cash_flow_abs_limit: float = Field(default=CASH_FLOW_ABS_LIMIT, alias="CASH_FLOW_ABS_LIMIT")
    lookback_hours: float = Field(default=LOOKBACK_HOURS, alias="LOOKBACK_HOURS")

    def thresholds(self) -> Thresholds:
        return Thresholds(
            drift_max_pct=self.drift_max_pct,
            move_alert_pct=self.move_alert_pct,
            buy_dip_pct=self.buy_dip_pct,
            consider_skim_pct=self.consider_skim_pct,
            cash_flow_abs_limit=self.cash_flow_abs_limit,
            lookback_hours=self.lookback_hours,
        )

    @property
    def resolved_snapshots_path(self) -> Path:
        return Path(self.snapshots_path or Path(self.state_dir) / "snapshots.json")

    @property
    def resolved_ledger_path(self) -> Path:
        return Path(self.ledger_path or Path(self.state_dir) / "ledger.json")

    @property
    def sender(self) -> str | None:
        return self.email_from or self.smtp_user

    @property
    def recipient(self) -> str | None:
        return self.email_to or self.smtp_user

    def require_smtp(self):
        missing = [
            name
            for name, value in (
                ("SMTP_HOST", self.smtp_host),
                ("SMTP_USER", self.smtp_user),
                ("SMTP_PASS", self.smtp_pass),
                ("EMAIL_TO", self.recipient),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"missing {', '.join(missing)}")


def load_settings(**overrides) -> Settings:
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        missing = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ConfigError(f"invalid configuration: {', '.join(missing) or exc}") from exc
    if not settings.t212_base.strip() or not settings.t212_api_key.strip():
        raise ConfigError("missing T212_BASE or T212_API_KEY")
    return settings
