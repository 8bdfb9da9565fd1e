"""
Configuration Module

This module manages application configuration settings loaded from
environment variables and an optional .env file.

Features:
- Environment loading
- Upload root and URL prefix
- Size limits
- Filename entropy
- Server and CORS settings

Data Model:
- UploadSettings (immutable)

Dependencies:
- dotenv for loading
- pydantic for validation
- os for env

Author: Snapped Development Team
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

load_dotenv()

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB application limit
DEFAULT_SERVER_MAX_FILESIZE = 8 * 1024 * 1024  # Server-level body limit
DEFAULT_RANDOM_HEX_LENGTH = 16
MIN_RANDOM_HEX_LENGTH = 8


class UploadSettings(BaseModel):
    """
    Upload service settings.

    Passed explicitly to create_app() and UploadHandler so tests can point
    the service at a temporary directory.

    Attributes:
        upload_root (Path): Filesystem root for stored images
        upload_url_prefix (str): Prefix of the file_path returned to callers
        max_file_size (int): Application-level size limit in bytes
        server_max_filesize (int): Server-level size limit in bytes
        random_hex_length (int): Hex characters of randomness in filenames
        cors_origins (List[str]): Allowed CORS origins
        host (str): Bind address
        port (int): Bind port
        log_level (str): Root logging level
    """
    model_config = ConfigDict(frozen=True)

    upload_root: Path = Path("uploads")
    upload_url_prefix: str = "uploads"
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    server_max_filesize: int = DEFAULT_SERVER_MAX_FILESIZE
    random_hex_length: int = DEFAULT_RANDOM_HEX_LENGTH
    cors_origins: List[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @field_validator("max_file_size", "server_max_filesize")
    @classmethod
    def _positive_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("size limits must be positive")
        return value

    @field_validator("random_hex_length")
    @classmethod
    def _enough_entropy(cls, value: int) -> int:
        if value < MIN_RANDOM_HEX_LENGTH:
            raise ValueError(f"random_hex_length must be at least {MIN_RANDOM_HEX_LENGTH}")
        if value % 2:
            raise ValueError("random_hex_length must be even")
        return value

    @field_validator("upload_url_prefix")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        return value.strip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls) -> "UploadSettings":
        """
        Build settings from environment variables.

        Returns:
            UploadSettings: Validated settings

        Raises:
            pydantic.ValidationError: For invalid values
        """
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            upload_root=os.getenv("UPLOAD_ROOT", "uploads"),
            upload_url_prefix=os.getenv("UPLOAD_URL_PREFIX", "uploads"),
            max_file_size=os.getenv("MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
            server_max_filesize=os.getenv("SERVER_MAX_FILESIZE", DEFAULT_SERVER_MAX_FILESIZE),
            random_hex_length=os.getenv("RANDOM_HEX_LENGTH", DEFAULT_RANDOM_HEX_LENGTH),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            host=os.getenv("HOST", "0.0.0.0"),
            port=os.getenv("PORT", 8000),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
