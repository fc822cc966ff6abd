"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, boardctl.toml only contains overrides.
A fresh workspace needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from boardctl.domain.validation import FieldRules

# --- boardctl.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    path: str = "boardctl.json"
    lock_timeout: float = 10.0
    recover_corrupt: bool = False
    indent: int = 2


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    board_title_min: int = Field(default=2, ge=1)
    column_title_min: int = Field(default=2, ge=1)
    card_content_min: int = Field(default=3, ge=1)

    def to_rules(self) -> FieldRules:
        return FieldRules(
            board_title_min=self.board_title_min,
            column_title_min=self.column_title_min,
            card_content_min=self.card_content_min,
        )


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    local_dir: str | None = None
    cache: bool = True


class BoardctlConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    store: StoreConfig = Field(default_factory=StoreConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
