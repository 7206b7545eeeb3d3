"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use FILEINJECTOR_ prefix (e.g., FILEINJECTOR_ENCODING=latin-1).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use FILEINJECTOR_ prefix.

    Examples:
        FILEINJECTOR_ENCODING=utf-8
        FILEINJECTOR_DELIMITERS_FILE=injector.yaml
        FILEINJECTOR_SOURCEMAP_SUFFIX=.json
    """

    model_config = SettingsConfigDict(
        env_prefix="FILEINJECTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Document configuration
    encoding: str = Field(
        default="utf-8",
        description="Codec used to convert document bytes to text and back",
    )

    # Option parser configuration
    separator: str = Field(
        default=",",
        description="Separator between options inside a directive",
    )

    escaped_separator_placeholder: str = Field(
        default="\x00ESCAPED_SEP\x00",
        description="Placeholder protecting escaped separators while splitting (uses null bytes to avoid collisions)",
    )

    # Delimiter configuration
    delimiters_file: str = Field(
        default=".fileinjector.yaml",
        description="YAML file (relative to the input directory) declaring extra delimiters",
    )

    # Output configuration
    sourcemap_suffix: str = Field(
        default=".map",
        description="Suffix appended to the output filename for the written source map",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
