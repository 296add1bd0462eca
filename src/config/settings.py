"""Global broker settings"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Centralized configuration.
    Reads configs from env variables.
    """

    app_name: str = "Session Broker"
    server_host: str = "0.0.0.0"
    server_port: int = 6001

    log_level: str = "INFO"

    # Length of the identity token handed out by the "id" command
    user_id_length: int = 16

    room_id_max_length: int = 32

    model_config = {"env_file": ".env"}


settings = Settings()
