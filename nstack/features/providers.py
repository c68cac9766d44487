"""Database provider bundles for the Drizzle feature.

Each provider is a YAML file in nstack/templates/drizzle/providers/ carrying
everything the Drizzle handler needs: dependency lists, the env variable it
reads, connection code, env template and example script. Adding a provider
means adding a file; no code changes.
"""
from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from nstack.core.errors import ProviderConfigError
from nstack.core.logger import get_logger
from nstack.core.project_structure import ProjectStructure
from nstack.core.template_engine import TEMPLATES_DIR, TemplateEngine

logger = get_logger(__name__)

PROVIDERS_DIR = TEMPLATES_DIR / "drizzle" / "providers"


class ClientPlaceholder(BaseModel):
    """A stub for a client the user must generate with an external tool."""

    model_config = ConfigDict(extra='forbid')

    path: str
    content: str
    hints: List[str] = Field(default_factory=list)


class DatabaseProvider(BaseModel):
    """One database backend choice for the Drizzle feature."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    key: str
    name: str
    order: int = 100
    description: str
    env_var: str
    connection_label: str
    dependencies: List[str] = Field(min_length=1)
    dev_dependencies: List[str] = Field(min_length=1)
    connection: str
    env_template: str
    example_usage: str
    schema_template: Literal["default", "multi_tenant"] = "default"
    route_entity: Literal["users", "tenants"] = "users"
    config_note: Optional[str] = None
    client_placeholder: Optional[ClientPlaceholder] = None

    @field_validator('env_var')
    @classmethod
    def validate_env_var(cls, v):
        """Env variable names are upper-case identifiers."""
        if not v.replace("_", "").isalnum() or not v.isupper():
            raise ValueError(f"'{v}' is not a valid environment variable name")
        return v

    @property
    def title(self) -> str:
        return f"{self.name} - {self.description}"


class ProviderRegistry:
    """Loads provider bundles and renders the files that depend on them."""

    def __init__(self, data_dir: Optional[Path] = None, engine: Optional[TemplateEngine] = None):
        self.data_dir = Path(data_dir) if data_dir else PROVIDERS_DIR
        self.engine = engine or TemplateEngine()
        self._providers: Optional[Dict[str, DatabaseProvider]] = None

    def _load(self) -> Dict[str, DatabaseProvider]:
        if self._providers is not None:
            return self._providers

        if not self.data_dir.is_dir():
            raise ProviderConfigError(f"Provider directory not found: {self.data_dir}")

        providers = {}
        for yaml_file in sorted(self.data_dir.glob("*.yml")):
            provider = self.load_provider_file(yaml_file)
            if provider.key in providers:
                raise ProviderConfigError(
                    f"Duplicate provider key '{provider.key}' in {yaml_file}"
                )
            providers[provider.key] = provider

        if not providers:
            raise ProviderConfigError(f"No providers defined in {self.data_dir}")

        self._providers = providers
        return providers

    @staticmethod
    def load_provider_file(path: Path) -> DatabaseProvider:
        """Parse and validate one provider file.

        Raises:
            ProviderConfigError: If the file is unreadable, not YAML, or incomplete
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ProviderConfigError(f"Failed to read provider file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ProviderConfigError(f"Provider file {path} must contain a mapping")

        data.setdefault('key', path.stem)
        try:
            return DatabaseProvider(**data)
        except ValidationError as e:
            raise ProviderConfigError(f"Invalid provider file {path}:\n{e}") from e

    def list_providers(self) -> List[DatabaseProvider]:
        return sorted(self._load().values(), key=lambda p: (p.order, p.name))

    def get(self, key: str) -> DatabaseProvider:
        providers = self._load()
        if key not in providers:
            raise ProviderConfigError(
                f"Unknown database provider '{key}' "
                f"(available: {', '.join(p.key for p in self.list_providers())})"
            )
        return providers[key]

    def render_config(self, provider: DatabaseProvider) -> str:
        """Render drizzle.config.ts for the provider's env variable."""
        return self.engine.render_template(
            "drizzle/drizzle.config.ts.j2",
            {
                "env_var": provider.env_var,
                "config_note": provider.config_note.rstrip() if provider.config_note else None,
            },
        )

    def render_schema(self, provider: DatabaseProvider) -> str:
        return self.engine.read_template(f"drizzle/schema/{provider.schema_template}.ts")

    def render_api_route(self, provider: DatabaseProvider, structure: ProjectStructure) -> str:
        router = "app" if structure.is_app_router else "pages"
        return self.engine.read_template(f"drizzle/routes/{router}_{provider.route_entity}.ts")
