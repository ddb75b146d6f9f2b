import os
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
)

IgnorePrimitive = StrictBool | StrictInt | StrictFloat | StrictStr


class IgnoreRule(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    property: str = Field(min_length=1)
    ignore_if: bool | None = Field(default=None, alias="ignoreIf")
    ignore_values: list[IgnorePrimitive] | None = Field(default=None, alias="ignoreValues")


class SanitizationRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    remove_fenced_code_blocks: bool = False


class DestinationConfig(BaseModel):
    """A publishing endpoint (site backend) notes are delivered to."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    url: str = ""
    api_key: SecretStr | None = None
    api_key_env: str = "VAULTPRESS_API_KEY"
    timeout: float = Field(default=30.0, gt=0)

    def resolve_api_key(self) -> str:
        if self.api_key is not None and self.api_key.get_secret_value():
            return self.api_key.get_secret_value()
        return os.environ.get(self.api_key_env, "")


class FolderConfig(BaseModel):
    """Binds a vault folder to a destination and a route base."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    vault_folder: str = ""
    route_base: str = ""
    destination_id: str
    sanitization: SanitizationRules | None = Field(
        default_factory=lambda: SanitizationRules(remove_fenced_code_blocks=True)
    )


class AssetsConfig(BaseModel):
    folder: str = "assets"
    vault_fallback: bool = True


DEFAULT_IGNORE_RULES: list[IgnoreRule] = [
    IgnoreRule(property="publish", ignore_if=False),
    IgnoreRule(property="draft", ignore_if=True),
    IgnoreRule(property="type", ignore_values=["Dashboard"]),
]


class VaultpressConfig(BaseModel):
    vault_path: str = "."
    destinations: list[DestinationConfig] = Field(default_factory=list)
    folders: list[FolderConfig] = Field(default_factory=list)
    ignore_rules: list[IgnoreRule] = Field(default_factory=lambda: list(DEFAULT_IGNORE_RULES))
    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
