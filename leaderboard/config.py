from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='POSTGRES_')

    HOST: str = 'localhost'
    PORT: int = 5432
    DB: str = 'leaderboard'
    USER: str = 'postgres'
    PASSWORD: str = 'postgres'
    MIN_POOL_SIZE: int = 5
    MAX_POOL_SIZE: int = 20
    COMMAND_TIMEOUT: float = 10.0

database = DatabaseConfig()

class LeaderboardConfig(BaseSettings):
    store_backend: str = 'postgres'
    max_limit: int = 50
    default_limit: int = 50
    request_timeout: float = 5.0
    user_id_header: str = 'X-User-ID'
    log_level: str = 'INFO'
    app_env: str = 'production'
    host: str = '0.0.0.0'
    port: int = 8080

leaderboard = LeaderboardConfig()
