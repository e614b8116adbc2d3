"""Configuration schema for TT Bot using nested Pydantic models."""

from datetime import timedelta, timezone
from typing import Annotated, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

_FROZEN: ConfigDict = ConfigDict(
    str_strip_whitespace=True,
    extra="forbid",
    frozen=True,
)


class DiscordConfig(BaseModel):
    """Discord service configuration."""

    token: str = Field(
        ...,
        description="Discord bot token",
        min_length=1,
    )
    guild_id: int | None = Field(
        default=None,
        description="Guild to register commands in; commands register globally when unset",
        gt=0,
    )

    model_config: ClassVar[ConfigDict] = _FROZEN

    @field_validator("token")
    @classmethod
    def validate_discord_token(cls, v: str) -> str:
        """Validate Discord token format."""
        if len(v) < 10:
            raise ValueError("Discord token appears to be too short")
        return v


class ServicesConfig(BaseModel):
    """External services configuration."""

    discord: DiscordConfig

    model_config: ClassVar[ConfigDict] = _FROZEN


class TimestampsConfig(BaseModel):
    """Configuration for the /timestamp command."""

    default_utc_offset_minutes: Annotated[int, Field(ge=-1439, le=1439)] = Field(
        default=60,
        description="Server-wide default timezone as an offset from UTC in minutes",
    )

    model_config: ClassVar[ConfigDict] = _FROZEN


class MaintainerConfig(BaseModel):
    """Who users are asked to contact when a command fails."""

    contact: str = Field(
        default="the bot maintainer",
        description="Mention or name of the maintainer shown in error messages",
        min_length=1,
    )
    object_pronoun: str = Field(
        default="them",
        description="Object pronoun of the maintainer (e.g. her, him, them)",
        min_length=1,
    )

    model_config: ClassVar[ConfigDict] = _FROZEN

    def diagnostic_message(self) -> str:
        """The generic message sent when a command could not be completed."""
        return (
            "An error happened on the server side. "
            f"Please contact {self.contact} and tell {self.object_pronoun} "
            "what command you ran at what time."
        )


class TTBotConfig(BaseModel):
    """
    Configuration model for TT Bot with nested structure.

    The model is immutable once constructed; it is built at startup and
    shared read-only by every interaction.
    """

    services: ServicesConfig
    timestamps: TimestampsConfig = Field(default_factory=TimestampsConfig)
    maintainer: MaintainerConfig = Field(default_factory=MaintainerConfig)

    model_config: ClassVar[ConfigDict] = _FROZEN

    def default_timezone(self) -> timezone:
        """The server-wide default timezone as a fixed offset."""
        return timezone(
            timedelta(minutes=self.timestamps.default_utc_offset_minutes)
        )
