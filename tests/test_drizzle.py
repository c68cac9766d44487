"""Tests for the Drizzle ORM feature."""
import json
import subprocess
from unittest.mock import Mock, patch

import pytest

from nstack.core.errors import IoError, SubprocessFailed
from nstack.core.package_manager import PackageManager
from nstack.core.runner import CommandRunner
from nstack.features.drizzle import add_drizzle, patch_package_json, update_env_file
from nstack.features.providers import ProviderRegistry

PACKAGE_JSON = """{
  "name": "my-app",
  "version": "0.1.0",
  "private": true,
  "scripts": {
    "dev": "next dev",
    "build": "next build"
  }
}
"""


@pytest.fixture
def registry():
    return ProviderRegistry()


def run_drizzle(ctx, provider_key):
    with patch("nstack.core.prompts.select", return_value=provider_key) as mock_select:
        add_drizzle(ctx)
    return mock_select


class TestAddDrizzle:
    def test_postgres_in_src_project(self, src_project, make_context, registry):
        """Empty src/ project + PostgreSQL produces schema, connection and .env."""
        ctx = make_context(src_project)

        run_drizzle(ctx, "postgresql")

        schema = (src_project / "src" / "db" / "schema.ts").read_text()
        assert 'pgTable("users"' in schema
        assert 'pgTable("posts"' in schema

        index = (src_project / "src" / "db" / "index.ts").read_text()
        assert index == registry.get("postgresql").connection

        assert "DATABASE_URL=" in (src_project / ".env").read_text()
        assert (src_project / "drizzle").is_dir()
        assert (src_project / "drizzle.config.ts").exists()
        assert (src_project / "src" / "pages" / "api" / "users.ts").exists()
        assert (src_project / "src" / "example-usage.ts").exists()
        assert not (src_project / "src" / "xata.ts").exists()

    @pytest.mark.parametrize("key", [
        "postgresql", "neon", "vercel-postgres", "supabase",
        "xata", "pglite", "nile", "bun-sql",
    ])
    def test_installs_exactly_provider_dependencies(self, src_project, make_context, registry, key):
        ctx = make_context(src_project, pm=PackageManager.NPM)
        provider = registry.get(key)

        run_drizzle(ctx, key)

        assert ctx.runner.history == [
            ["npm", "install", *provider.dependencies],
            ["npm", "install", "-D", *provider.dev_dependencies],
        ]
        config = (src_project / "drizzle.config.ts").read_text()
        assert f"process.env.{provider.env_var}!" in config
        assert provider.env_var in (src_project / ".env").read_text()

    def test_prompt_lists_providers_with_descriptions(self, src_project, make_context):
        mock_select = run_drizzle(make_context(src_project), "neon")

        message, choices = mock_select.call_args[0]
        assert message == "Select your database provider"
        assert choices[0] == ("PostgreSQL - Traditional PostgreSQL database (local or hosted)", "postgresql")
        assert len(choices) == 8
        assert mock_select.call_args[1]["default"] == "postgresql"

    def test_app_dir_layout(self, app_project, make_context):
        run_drizzle(make_context(app_project), "nile")

        assert 'pgTable("tenants"' in (app_project / "db" / "schema.ts").read_text()
        route = (app_project / "src" / "app" / "api" / "users" / "route.ts").read_text()
        assert "tenantsTable" in route
        assert "NextResponse" in route
        assert "NILEDB_URL" in (app_project / "src" / "example-usage.ts").read_text()

    def test_xata_writes_client_placeholder(self, src_project, make_context, output):
        run_drizzle(make_context(src_project), "xata")

        placeholder = (src_project / "src" / "xata.ts").read_text()
        assert "buildClient" in placeholder
        assert "npx xata codegen" in output.getvalue()

    def test_summary(self, src_project, make_context, output):
        run_drizzle(make_context(src_project), "supabase")

        text = output.getvalue()
        assert "Drizzle ORM has been successfully set up for Supabase" in text
        assert "Connection: postgres-js" in text
        assert "src/db/schema.ts - Database schema" in text

    @patch('subprocess.run')
    def test_dev_install_failure_aborts(self, mock_run, src_project, make_context):
        mock_run.side_effect = [
            Mock(returncode=0),
            subprocess.CalledProcessError(1, ["pnpm", "add", "-D"]),
        ]
        ctx = make_context(src_project, runner=CommandRunner(cwd=src_project))

        with pytest.raises(SubprocessFailed) as exc_info:
            run_drizzle(ctx, "neon")

        assert "Failed to install Drizzle dev dependencies for Neon" in str(exc_info.value)
        assert not (src_project / "drizzle.config.ts").exists()
        assert not (src_project / ".env").exists()

    @patch('subprocess.run')
    def test_runtime_install_failure_names_provider(self, mock_run, src_project, make_context):
        mock_run.side_effect = subprocess.CalledProcessError(1, ["pnpm", "add"])
        ctx = make_context(src_project, runner=CommandRunner(cwd=src_project))

        with pytest.raises(SubprocessFailed) as exc_info:
            run_drizzle(ctx, "pglite")

        assert "Failed to install Drizzle ORM dependencies for PGLite" in str(exc_info.value)
        assert mock_run.call_count == 1

    def test_undecodable_env_raises_io_error(self, src_project, make_context):
        env = src_project / ".env"
        env.write_bytes(b"API_KEY=caf\xe9\n")

        with pytest.raises(IoError) as exc_info:
            run_drizzle(make_context(src_project), "postgresql")

        assert exc_info.value.path == env
        assert env.read_bytes() == b"API_KEY=caf\xe9\n"


class TestPackageJsonPatch:
    def test_inserts_scripts(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text(PACKAGE_JSON)

        assert patch_package_json(path) is True

        scripts = json.loads(path.read_text())["scripts"]
        assert scripts["db:generate"] == "drizzle-kit generate"
        assert scripts["db:migrate"] == "drizzle-kit migrate"
        assert scripts["db:studio"] == "drizzle-kit studio"
        assert scripts["db:push"] == "drizzle-kit push"
        assert scripts["dev"] == "next dev"

    def test_idempotent_across_runs(self, src_project, make_context):
        """Running the whole handler twice inserts the scripts once."""
        path = src_project / "package.json"
        path.write_text(PACKAGE_JSON)

        run_drizzle(make_context(src_project), "postgresql")
        run_drizzle(make_context(src_project), "postgresql")

        assert path.read_text().count('"db:generate"') == 1
        json.loads(path.read_text())

    def test_missing_opening_is_left_alone(self, tmp_path):
        path = tmp_path / "package.json"
        original = '{\n  "scripts":{"dev": "next dev"}\n}\n'
        path.write_text(original)

        assert patch_package_json(path) is False
        assert path.read_text() == original

    def test_missing_file(self, tmp_path):
        assert patch_package_json(tmp_path / "package.json") is False
        assert not (tmp_path / "package.json").exists()


class TestEnvFile:
    def test_creates_from_template(self, tmp_path, registry):
        path = tmp_path / ".env"
        provider = registry.get("neon")

        assert update_env_file(path, provider) is True
        assert path.read_text() == provider.env_template

    def test_appends_when_variable_absent(self, tmp_path, registry):
        path = tmp_path / ".env"
        path.write_text("API_KEY=abc")
        provider = registry.get("nile")

        assert update_env_file(path, provider) is True
        assert path.read_text() == "API_KEY=abc\n\n" + provider.env_template

    def test_substring_match_suppresses_append(self, tmp_path, registry):
        """A comment that merely mentions the name still counts as present."""
        path = tmp_path / ".env"
        original = "# DATABASE_URL is configured in the hosting dashboard\n"
        path.write_text(original)

        assert update_env_file(path, registry.get("postgresql")) is False
        assert path.read_text() == original

    def test_longer_name_suppresses_append(self, tmp_path, registry):
        path = tmp_path / ".env"
        path.write_text("SHADOW_DATABASE_URL=postgres://localhost/shadow\n")

        assert update_env_file(path, registry.get("supabase")) is False
