from pydantic import BaseModel, Field, model_validator
from typing import Literal


class PermissionConfig(BaseModel):
    datasource: str = ".rolegate/permissions.db"
    timeout: float = Field(default=5.0, gt=0)
    create_schema: bool = True


class ResolverConfig(BaseModel):
    groups_file: str = ".rolegate/groups.yaml"
    base_url: str | None = None
    token_env: str = "ROLEGATE_IDP_TOKEN"
    timeout: float = Field(default=10.0, gt=0)


class PluginsConfig(BaseModel):
    store: str | None = None
    resolver: str | None = None


class RolegateConfig(BaseModel):
    permissions: PermissionConfig = Field(default_factory=PermissionConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

    @model_validator(mode="after")
    def _check_resolver(self) -> "RolegateConfig":
        if self.plugins.resolver == "scim" and not self.resolver.base_url:
            raise ValueError("plugins.resolver 'scim' requires resolver.base_url")
        return self
