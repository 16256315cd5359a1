"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Multiplier presets offered for both spin speed and stop speed
SPEED_LEVELS: dict[str, float] = {
    "slow": 0.4,
    "normal": 1.0,
    "fast": 2.5,
}


class SpinSettings(BaseSettings):
    """Spin physics. Velocities are radians per animation frame."""

    model_config = SettingsConfigDict(env_prefix="SPINWHEEL_SPIN_")

    # "Fast" range the start velocity is drawn from
    velocity_min: float = Field(default=0.15, gt=0.0)
    velocity_max: float = Field(default=0.25, gt=0.0)

    # "Braking" range the per-frame deceleration is drawn from
    brake_min: float = Field(default=0.001, gt=0.0)
    brake_max: float = Field(default=0.004, gt=0.0)

    speed_multiplier: float = Field(default=1.0, gt=0.0)
    stop_speed_multiplier: float = Field(default=1.0, gt=0.0)

    @property
    def velocity_range(self) -> tuple[float, float]:
        return (self.velocity_min, self.velocity_max)

    @property
    def brake_range(self) -> tuple[float, float]:
        return (self.brake_min, self.brake_max)


class StorageSettings(BaseSettings):
    """Where the wheel configuration is persisted."""

    model_config = SettingsConfigDict(env_prefix="SPINWHEEL_STORAGE_")

    enabled: bool = True
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".spinwheel")


class SimulatorSettings(BaseSettings):
    """Desktop window settings."""

    model_config = SettingsConfigDict(env_prefix="SPINWHEEL_SIMULATOR_")

    width: int = 900
    height: int = 640
    wheel_size: int = 520
    fps: int = Field(default=60, gt=0)
    title: str = "Spin Wheel"
    fullscreen: bool = False


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SPINWHEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    env: Literal["simulator", "headless"] = "simulator"
    debug: bool = False

    # Headless runs: frames to spin before requesting the stop
    headless_spin_frames: int = Field(default=120, ge=0)
    seed: int | None = None

    # Nested settings
    spin: SpinSettings = Field(default_factory=SpinSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    simulator: SimulatorSettings = Field(default_factory=SimulatorSettings)

    @property
    def is_simulator(self) -> bool:
        """Check if running with the desktop window."""
        return self.env == "simulator"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
