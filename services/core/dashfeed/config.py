from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the directory where this config.py file is located
_config_dir = Path(__file__).parent
_env_file = _config_dir.parent / ".env"  # services/core/.env


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_env_file),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    # Instrument
    symbol: str = "BTCUSDT"  # Binance spot/futures symbol
    coin_id: str = "bitcoin"  # CoinGecko coin id
    liquidation_symbol: str = "BTC"  # CoinGlass base asset

    # Block A/B timeframes (comma-separated Binance intervals)
    trend_timeframes: str = "15m,1h,4h,1d"
    trend_kline_limit: int = 250
    move_kline_limit: int = 5

    # Binance spot returns at most 1000 klines per request; longer ranges are paged
    kline_page_limit: int = 1000

    # Block D
    funding_rate_limit: int = 1000
    funding_sample: int = 42  # last 42 funding events = 14 days at 8h
    oi_history_points: int = 24

    # Block H
    range_kline_limit: int = 20

    # Upstream endpoints
    binance_spot_url: str = "https://api.binance.com"
    binance_futures_url: str = "https://fapi.binance.com"
    coingecko_url: str = "https://api.coingecko.com/api/v3"
    fear_greed_url: str = "https://api.alternative.me"
    coinglass_url: str = "https://open-api-v3.coinglass.com"

    # Provider keys (only needed for liquidations)
    coinglass_api_key: str | None = None

    # HTTP
    http_timeout_seconds: float = 10.0
    cdn_max_age_seconds: int = 60

    def get_trend_timeframes(self) -> list[str]:
        """Parse block A/B timeframes."""
        return [tf.strip() for tf in self.trend_timeframes.split(",") if tf.strip()]

    def get_symbol(self) -> str:
        """Binance symbol (uppercase)."""
        return self.symbol.strip().upper()


def get_settings() -> Settings:
    return Settings()
