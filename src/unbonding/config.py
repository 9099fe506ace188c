"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class LcdSettings(BaseSettings):
    """Cosmos LCD (REST gateway) connection settings."""

    model_config = SettingsConfigDict(env_prefix="LCD_")

    url: str = "https://lcd.secret.express"
    timeout_seconds: float = 30.0


class AggregatorSettings(BaseSettings):
    """Unbonding aggregation parameters.

    Page limits are the per-request bounds sent to the LCD. With
    follow_pagination disabled, anything beyond a single page is dropped.
    All fields configurable via AGGREGATOR_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_")

    validator_page_limit: int = 300
    unbonding_page_limit: int = 1000
    follow_pagination: bool = True
    validator_status: str | None = None  # e.g. BOND_STATUS_BONDED; None = all
    snapshot_path: str = "unbonding.json"
    denom: str = "SCRT"
    display_exponent: int = 6  # uscrt -> SCRT


class ChartSettings(BaseSettings):
    """Unbonding chart output and styling.

    All fields configurable via CHART_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="CHART_")

    output_path: str = "chart.png"
    timezone: str = "UTC"  # display timezone for date bucketing
    width: int = 800  # pixels
    height: int = 400  # pixels
    title: str = "SCRT Unbonding"
    background_color: str = "#2d2e2f"
    text_color: str = "white"
    grid_color: str = "#1f1f1f"
    bar_color: str = "#007bff80"
    bar_edge_color: str = "#007bff"


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"
    lcd: LcdSettings = LcdSettings()
    aggregator: AggregatorSettings = AggregatorSettings()
    chart: ChartSettings = ChartSettings()
