from typing import Literal

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings read from the environment or ``.env``.

    These only seed the defaults the CLI builds its config objects from.
    Core functions never read settings; they take explicit configs.
    """

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    log_json: bool = Field(
        default=False,
        validation_alias="LOG_JSON",
        description="Write the log file as JSON lines",
    )
    readiness_baseline_mode: Literal["session_top3", "rolling_top3_of5"] = Field(
        default="session_top3",
        validation_alias="READINESS_BASELINE_MODE",
        description="Baseline selection mode used by the CLI readiness command",
    )
    readiness_set_impact: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        validation_alias="READINESS_SET_IMPACT",
        description="Blend weight of the set zone score against prior readiness",
    )
    signal_require_mdf: bool = Field(
        default=True,
        validation_alias="SIGNAL_REQUIRE_MDF",
        description="Require median-frequency corroboration before declaring fall",
    )
    sim_default_seed: int | None = Field(
        default=None,
        validation_alias="SIM_DEFAULT_SEED",
        description="Seed used by the simulator when none is passed explicitly",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
