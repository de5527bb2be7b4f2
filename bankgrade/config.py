"""Runtime settings. Defaults come from the environment; CLI flags override them."""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

BANKS_DIR = os.environ.get("BANKGRADE_BANKS_DIR", "banks")
TEMPLATES_DIR = os.environ.get("BANKGRADE_TEMPLATES_DIR", "templates")
HISTORY_DIR = os.environ.get("BANKGRADE_HISTORY_DIR", "history")
OUTPUT_DIR = os.environ.get("BANKGRADE_OUTPUT_DIR", "docs")
BASE_URL = os.environ.get("BASE_URL", "https://bankgradesecurity.com/")
SCAN_DELAY = os.environ.get("BANKGRADE_SCAN_DELAY", "5")
STRICT_HISTORY = os.environ.get("BANKGRADE_STRICT_HISTORY", "").lower() in ("1", "true", "yes")
LOG_LEVEL = os.environ.get("BANKGRADE_LOG_LEVEL", "INFO")


class Settings(BaseModel):
    banks_dir: str = BANKS_DIR
    templates_dir: str = TEMPLATES_DIR
    history_dir: str = HISTORY_DIR
    output_dir: str = OUTPUT_DIR
    base_url: str = Field(default=BASE_URL, validate_default=True)
    # Environment values arrive as strings and are checked like CLI values.
    scan_delay: float = Field(default=SCAN_DELAY, validate_default=True)
    strict_history: bool = STRICT_HISTORY
    month: Optional[str] = None
    log_level: str = Field(default=LOG_LEVEL, validate_default=True)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return v if v.endswith("/") else f"{v}/"

    @field_validator("scan_delay")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Scan delay cannot be negative")
        return v

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if len(v) != 6 or not v.isdigit() or not 1 <= int(v[4:]) <= 12:
            raise ValueError("Month must be YYYYMM")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level {v!r}")
        return v
