"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use ABBREX_ prefix (e.g., ABBREX_DEFAULT_SYNTAX=xhtml).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use ABBREX_ prefix.

    Examples:
        ABBREX_DEFAULT_SYNTAX=xhtml
        ABBREX_LOREM_SEED=42
        ABBREX_INDENT="  "
    """

    model_config = SettingsConfigDict(
        env_prefix="ABBREX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Syntax selection
    default_syntax: str = Field(
        default="html",
        description="Syntax used for markup abbreviations when none is requested",
    )

    stylesheet_syntax: str = Field(
        default="css",
        description="Syntax used for stylesheet abbreviations when none is requested",
    )

    # Resolution
    fuzzy_min_score: float = Field(
        default=0.0,
        description="Minimum fuzzy score a stylesheet snippet needs to be accepted (0 accepts any match)",
    )

    max_repeat: Optional[int] = Field(
        default=None,
        description="Upper bound on implicit repeats (e.g. pasted text lines); None means unlimited",
    )

    # Output
    indent: str = Field(
        default="\t",
        description="Indentation unit written for each nesting level",
    )

    lorem_seed: Optional[int] = Field(
        default=None,
        description="Seed for the lorem generator; None draws a fresh random sequence",
    )

    verbosity: int = Field(
        default=0,
        description="Logging verbosity used when no program state is connected",
    )

    @field_validator("fuzzy_min_score")
    @classmethod
    def score_checkRange(cls, value: float) -> float:
        """
        Clamp-check the fuzzy score threshold.

        Args:
            value: Candidate threshold

        Returns:
            The same value when it lies within [0, 1]

        Raises:
            ValueError: If the threshold is outside [0, 1]
        """
        if not 0 <= value <= 1:
            raise ValueError("fuzzy_min_score must be between 0 and 1")
        return value

    def syntax_default(self, kind: str) -> str:
        """
        Default syntax name for an abbreviation type.

        Args:
            kind: Either "markup" or "stylesheet"

        Returns:
            Configured default syntax for that type

        Example:
            >>> AppSettings().syntax_default("stylesheet")
            'css'
        """
        return self.stylesheet_syntax if kind == "stylesheet" else self.default_syntax


# Singleton instance - import this in your code
appsettings = AppSettings()
