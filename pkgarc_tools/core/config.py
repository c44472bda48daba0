"""Configuration management for pkgarc-tools."""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger()


class ArchiveConfig(BaseModel):
    """Archive engine configuration."""

    chunk_size: int = Field(
        default=64 * 1024,  # 64KB
        description="Read buffer size for range reads in bytes"
    )
    compression_level: int = Field(
        default=-1,
        description="gzip compression level (0-9, -1 for zlib default)"
    )
    reuse_catalog_space: bool = Field(
        default=True,
        description="Start appends over the previous catalog block on reopen"
    )

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        """Validate chunk size value."""
        if v <= 0:
            raise ValueError("Chunk size must be positive")
        return v

    @field_validator("compression_level")
    @classmethod
    def validate_compression_level(cls, v: int) -> int:
        """Validate compression level value."""
        if v < -1 or v > 9:
            raise ValueError("Compression level must be between -1 and 9")
        return v


class AppConfig(BaseModel):
    """Application configuration."""

    config_dir: Path = Field(
        default=Path.home() / ".config" / "pkgarc-tools",
        description="Configuration directory"
    )

    # Archive settings
    archive_chunk_size: int = Field(
        default=64 * 1024,
        description="Read buffer size for range reads in bytes"
    )
    compression_level: int = Field(default=-1, description="gzip compression level")
    reuse_catalog_space: bool = Field(
        default=True,
        description="Overwrite the previous catalog block when appending"
    )

    # Output settings
    output_format: str = Field(
        default="rich",
        description="Output format (rich, json, plain)"
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @classmethod
    def load(cls, config_file: Path | None = None) -> AppConfig:
        """Load configuration from file.

        Args:
            config_file: Path to config file, uses default if None

        Returns:
            Application configuration
        """
        if config_file is None:
            config_file = Path.home() / ".config" / "pkgarc-tools" / "config.json"

        if config_file.exists():
            with open(config_file) as f:
                data = json.load(f)
                return cls(**data)

        # Return defaults
        return cls()

    def save(self, config_file: Path | None = None) -> None:
        """Save configuration to file.

        Args:
            config_file: Path to config file, uses default if None
        """
        if config_file is None:
            config_file = self.config_dir / "config.json"

        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

        logger.info("config_saved", path=str(config_file))

    def archive_config(self) -> ArchiveConfig:
        """Build the archive engine configuration from these settings."""
        return ArchiveConfig(
            chunk_size=self.archive_chunk_size,
            compression_level=self.compression_level,
            reuse_catalog_space=self.reuse_catalog_space,
        )

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format."""
        valid_formats = {"rich", "json", "plain"}
        if v not in valid_formats:
            raise ValueError(f"Invalid output format: {v}. Valid formats: {valid_formats}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {valid_levels}")
        return v

    @field_validator("archive_chunk_size")
    @classmethod
    def validate_archive_chunk_size(cls, v: int) -> int:
        """Validate archive chunk size value."""
        if v <= 0:
            raise ValueError("Archive chunk size must be positive")
        return v

    @field_validator("compression_level")
    @classmethod
    def validate_compression_level(cls, v: int) -> int:
        """Validate compression level value."""
        if v < -1 or v > 9:
            raise ValueError("Compression level must be between -1 and 9")
        return v
