from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Alpha Vantage
    alpha_vantage_api_key: str = ""
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"
    request_timeout: float = 30.0
    benchmark_symbol: str = "^GSPC"
    news_limit: int = 20

    # Analysis
    cache_ttl_seconds: int = 300

    # Logging
    log_level: str = "INFO"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
