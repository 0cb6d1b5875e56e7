import os
import tomllib
from pathlib import Path

import tomlkit
from pydantic import HttpUrl, SecretStr, WebsocketUrl, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from univ3_deployer.logging import logger

CONFIG_DIR = Path(
    os.environ.get("UNIV3_DEPLOYER_CONFIG_DIR", Path.home() / ".config" / "univ3_deployer")
)
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_ARTIFACT_PATHS = [
    Path("artifacts"),
    Path("node_modules/@uniswap/v3-core/artifacts"),
    Path("node_modules/@uniswap/v3-periphery/artifacts"),
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="UNIV3_DEPLOYER_")

    rpc: HttpUrl | WebsocketUrl | Path | None = None
    artifact_paths: list[Path] = DEFAULT_ARTIFACT_PATHS
    private_key: SecretStr | None = None
    transaction_timeout: float = 120.0

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment variables take precedence over values read from the config file
        return env_settings, init_settings, file_secret_settings

    @field_validator("rpc", mode="after")
    def validate_rpc_path(
        cls,  # noqa: N805
        endpoint: HttpUrl | WebsocketUrl | Path | None,
    ) -> HttpUrl | WebsocketUrl | Path | None:
        """
        Convert an IPC socket path to an absolute reference, leaving HTTP and WS URLs as-is.
        """

        return endpoint.expanduser().absolute() if isinstance(endpoint, Path) else endpoint

    def to_toml_dict(self) -> dict:
        """
        Dump the settings to plain values, omitting unset values and the private key.
        """

        return self.model_dump(mode="json", exclude_none=True, exclude={"private_key"})


def load_config_from_file(config_path: Path) -> Settings:
    return Settings(
        **tomllib.loads(
            config_path.read_text(),
        ),
    )


def save_config_to_file(config: Settings, config_path: Path = CONFIG_FILE) -> None:
    config_path.write_text(
        tomlkit.dumps(
            config.to_toml_dict(),
        ),
    )


if not CONFIG_DIR.exists():
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(f"Created a configuration directory at {CONFIG_DIR}.")

if CONFIG_FILE.exists():
    settings = load_config_from_file(CONFIG_FILE)
else:
    settings = Settings()
    save_config_to_file(settings)
    logger.info(f"Created a configuration file at {CONFIG_FILE}.")
