from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from shapecheck.validation.schema import ValidationOptions


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_JSON: bool = False  # True for machine-readable JSON lines, False for colored console output

    # Default option flags for the command line; library calls never read these
    NO_IMPLICIT_DEFAULT: bool = False
    SET_MISSING_TO_DEFAULT: bool = False
    ENABLE_IGNORE_NULL_PROPERTIES: bool = False

    model_config = SettingsConfigDict(env_prefix="SHAPECHECK_", env_file=".env", extra="ignore")

    def validation_options(self, **overrides: bool) -> ValidationOptions:
        """Options built from the settings, with explicit flags taking precedence."""
        flags = {
            "no_implicit_default": self.NO_IMPLICIT_DEFAULT,
            "set_missing_to_default": self.SET_MISSING_TO_DEFAULT,
            "enable_ignore_null_properties": self.ENABLE_IGNORE_NULL_PROPERTIES,
        }
        flags.update({key: True for key, enabled in overrides.items() if enabled})
        return ValidationOptions(**flags)


@lru_cache
def get_settings() -> Settings:
    return Settings()
