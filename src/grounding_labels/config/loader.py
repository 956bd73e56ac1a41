"""Configuration loader with Pydantic v2 validation.

Loads a ``grounding-labels.yaml`` file into a typed
:class:`GroundingLabelsConfig`.  Every section is optional and unknown
keys are allowed so older files keep loading as the schema grows.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load_string("agent:\\n  max_allowed_priority: Confidential\\n")
>>> config.agent.max_allowed_priority
<PriorityTier.CONFIDENTIAL: 'Confidential'>

A complete file::

    store:
      path: ./labels.json
      seed_defaults: true
    agent:
      max_allowed_priority: HighlyConfidential
      strict_validation: false
      enable_encryption: true
    classification:
      max_workers: 4
      keyword_rules: true
    audit:
      log_path: ./labels_audit.jsonl
    encryption:
      key_env_var: GROUNDING_LABELS_KEY
"""
from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from grounding_labels.labels.priority import PriorityTier
from grounding_labels.protection.encryption import KEY_ENV_VAR


class StoreConfig(BaseModel):
    """Where labels are persisted."""

    model_config = {"extra": "allow"}

    path: Path | None = Field(default=None)
    seed_defaults: bool = Field(default=True)


class AgentConfig(BaseModel):
    """Settings for the grounding and LLM-response pipeline helpers."""

    model_config = {"extra": "allow"}

    max_allowed_priority: PriorityTier | None = Field(default=PriorityTier.HIGHLY_CONFIDENTIAL)
    strict_validation: bool = Field(default=False)
    max_content_length: int = Field(default=100_000, ge=1)
    max_data_age_days: int = Field(default=365, ge=1)
    allowed_sources: list[str] = Field(
        default_factory=lambda: ["file", "database", "api", "sharepoint", "teams", "unknown"]
    )
    allowed_data_types: list[str] = Field(
        default_factory=lambda: ["text", "document", "spreadsheet", "presentation", "email", "chat"]
    )
    auto_classify_unlabeled: bool = Field(default=True)
    default_classification: str = Field(default="internal")
    enable_visual_indicators: bool = Field(default=True)
    enable_encryption: bool = Field(default=True)
    enable_audit_logging: bool = Field(default=True)

    @field_validator("max_allowed_priority", mode="before")
    @classmethod
    def parse_priority(cls, value: object) -> PriorityTier | None:
        if value is None:
            return None
        return PriorityTier.from_value(value)

    @property
    def max_data_age(self) -> timedelta:
        return timedelta(days=self.max_data_age_days)


class ClassificationConfig(BaseModel):
    """Content classification settings."""

    model_config = {"extra": "allow"}

    max_workers: int = Field(default=4, ge=1, le=64)
    keyword_rules: bool = Field(default=True)


class AuditConfig(BaseModel):
    """Configuration for the audit trail."""

    model_config = {"extra": "allow"}

    log_path: Path | None = Field(default=None)


class EncryptionConfig(BaseModel):
    """Where the content encryption key comes from."""

    model_config = {"extra": "allow"}

    key_env_var: str = Field(default=KEY_ENV_VAR, min_length=1)


class GroundingLabelsConfig(BaseModel):
    """Top-level configuration schema loaded from ``grounding-labels.yaml``."""

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    store: StoreConfig = Field(default_factory=StoreConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    encryption: EncryptionConfig = Field(default_factory=EncryptionConfig)


class ConfigLoader:
    """Loads and validates grounding-labels YAML configuration."""

    def load(self, config_path: Path) -> GroundingLabelsConfig:
        """Load and validate a YAML configuration file.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ValueError:
            When the YAML is malformed or fails Pydantic validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            return self.load_string(fh.read())

    def load_string(self, yaml_content: str) -> GroundingLabelsConfig:
        """Load and validate a YAML string directly."""
        try:
            raw = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML configuration: {exc}") from exc
        if not isinstance(raw, dict):
            raise ValueError("Configuration root must be a mapping")
        try:
            return GroundingLabelsConfig.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration: {exc}") from exc

    def load_or_defaults(self, config_path: Path) -> GroundingLabelsConfig:
        """Load ``config_path`` when it exists, otherwise return defaults."""
        return self.load(config_path) if config_path.exists() else self.defaults()

    def defaults(self) -> GroundingLabelsConfig:
        return GroundingLabelsConfig()

    def dump(self, config: GroundingLabelsConfig, output_path: Path) -> None:
        """Write ``config`` as YAML, creating parent directories."""
        data = config.model_dump(mode="json")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as fh:
            yaml.dump(data, fh, default_flow_style=False, sort_keys=False, allow_unicode=True)
