from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"

    PRICE_FEED_URL: str = "https://api.coingecko.com/api/v3"

    # chain name -> rpc url, e.g. RPC_URLS='{"ethereum": "http://localhost:8545"}'
    RPC_URLS: dict[str, str] = {}


settings = Settings()
