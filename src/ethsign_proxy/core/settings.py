"""Application settings and configuration.

This module defines all configuration options for the signing proxy.
Settings are loaded from environment variables with sensible defaults.

List values such as ``SIGNER_PRIVATE_KEYS`` are read as JSON, e.g.
``SIGNER_PRIVATE_KEYS='["0x4c08..."]'``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="EthSign Proxy", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # HTTP listener
    http_host: str = Field(default="127.0.0.1", alias="HTTP_HOST")
    http_port: int = Field(default=8545, alias="HTTP_PORT")

    # Signing keys unlocked at startup
    signer_private_keys: list[str] = Field(default_factory=list, alias="SIGNER_PRIVATE_KEYS")
    signer_keystore_file: str | None = Field(default=None, alias="SIGNER_KEYSTORE_FILE")
    signer_keystore_password_file: str | None = Field(
        default=None,
        alias="SIGNER_KEYSTORE_PASSWORD_FILE",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def keystore_configured(self) -> bool:
        """Return True when both the key file and its password file are set.

        Returns:
            Whether a V3 keystore should be decrypted at startup
        """
        return bool(self.signer_keystore_file and self.signer_keystore_password_file)


settings = Settings()
