"""
Settings for the templating engines, loaded from the environment and ``.env``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Seconds before a script, template or expression render is aborted.
    # None keeps execution unbounded.
    RENDER_TIMEOUT: float | None = Field(None, gt=0)

    # Comma-separated top-level module names exposed to scripts (e.g. "math,re").
    SCRIPT_EXTRA_MODULES: str = ""

    # Comma-separated script files loaded into every script runtime before the body runs.
    SCRIPT_SHARED_LIBRARIES: str = ""

    # Reject specs with more than one engine body instead of using first-match-wins.
    STRICT_TEMPLATE_SPEC: bool = False

    # Fail on any undefined name in text templates (default: bare names render empty).
    TEMPLATE_STRICT_UNDEFINED: bool = False


settings = Settings()  # type: ignore
