"""
Configuration management for Ticket Notifier.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TICKET_PATTERN = r"\b[A-Z]{3}-\d{1,6}\b"


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class TrackerConfig(BaseModel):
    """Issue tracker configuration."""
    base_url: Optional[str] = Field(
        None,
        description="Issue REST endpoint; tracker comments are off when unset"
    )
    comment_path: str = Field(
        "/comment",
        description="Suffix appended after the ticket id to reach the comment endpoint"
    )
    browse_url: str = Field(
        "",
        description="Issue browsing URL; the ticket id is appended to it"
    )
    login: str = Field("", description="Tracker login for basic authentication")
    password: SecretStr = Field(SecretStr(""), description="Tracker password")
    visibility_role: Optional[str] = Field(
        None,
        description="Restrict comments to this project role"
    )

    model_config = {"frozen": True}

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        v = _blank_to_none(v)
        return v.rstrip("/") if v else v

    @field_validator("visibility_role")
    @classmethod
    def blank_role_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class ChatConfig(BaseModel):
    """Chat webhook configuration."""
    webhook_url: Optional[str] = Field(
        None,
        description="Incoming webhook URL; chat notifications are off when unset"
    )
    channel: str = Field("#general", description="Channel to post to")
    username: str = Field("git", description="Bot display name")
    icon_emoji: str = Field(":git:", description="Bot icon identifier")

    model_config = {"frozen": True}

    @field_validator("webhook_url")
    @classmethod
    def blank_url_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class HookConfig(BaseModel):
    """Push processing configuration."""
    tracked_branch: str = Field(
        "refs/heads/master",
        description="Full ref name of the only branch that triggers notifications"
    )
    ticket_pattern: str = Field(
        DEFAULT_TICKET_PATTERN,
        description="Regular expression matching ticket identifiers"
    )
    source_url: Optional[str] = Field(
        None,
        description="Source browser base URL; the commit sha is appended to it"
    )
    dedupe_ticket_ids: bool = Field(
        False,
        description="Notify a ticket once per commit even when it is mentioned repeatedly"
    )
    dry_run: bool = Field(False, description="Log deliveries instead of sending them")
    request_timeout: float = Field(10.0, description="HTTP timeout in seconds")
    max_retries: int = Field(0, ge=0, description="Retries for failed HTTP deliveries")

    model_config = {"frozen": True}

    @field_validator("ticket_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid ticket pattern: {e}")
        return v

    @field_validator("source_url")
    @classmethod
    def blank_url_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class Settings(BaseSettings):
    """Main configuration settings."""
    tracker: TrackerConfig = TrackerConfig()
    chat: ChatConfig = ChatConfig()
    hook: HookConfig = HookConfig()

    model_config = SettingsConfigDict(
        env_prefix="TICKET_NOTIFIER_",
        env_nested_delimiter="__",
        frozen=True,
    )
