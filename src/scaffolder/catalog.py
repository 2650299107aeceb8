"""Template catalog: which body each artifact kind gets for each variant.

Source files are Jinja2 templates registered per :class:`VariantKey`;
JSON config files (``package.json``, ``tsconfig.json``) are built as dicts
and serialised here.  All renderers are pure functions of their inputs.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .models import DEFAULT_API_VERSION, PackageName, ProjectConfig
from .templates import TemplateRenderer
from .variants import VariantKey, select_variant


# ---------------------------------------------------------------------------
# Artifact kinds
# ---------------------------------------------------------------------------


class ArtifactKind(str, Enum):
    """Every kind of artifact the scaffolder can emit."""
    # Config
    MANIFEST = "manifest"
    MANIFEST_AMENDMENT = "manifest_amendment"
    TSCONFIG = "tsconfig"
    ENV_FILE = "env_file"
    DIRECTORY = "directory"
    # Sources
    LOGGER = "logger"
    DATABASE = "database"
    SWAGGER = "swagger"
    TRANSACTION_ID = "transaction_id"
    REQUEST_LOGGER = "request_logger"
    ERROR_HANDLER = "error_handler"
    HEALTH_ROUTE = "health_route"
    APP = "app"
    SERVER = "server"
    # Deployment
    DOCKERFILE = "dockerfile"
    COMPOSE = "compose"
    JENKINS = "jenkins"
    GITHUB_ACTIONS = "github_actions"


SOURCE_ROOT = "src"

FOLDERS: tuple[str, ...] = (
    "controllers",
    "routes",
    "services",
    "models",
    "middleware",
    "utils",
    "types",
    "config",
)

NODE_VERSION = 20

# Generated code falls back to this literal when API_VERSION is unset.
FALLBACK_API_VERSION = DEFAULT_API_VERSION


# ---------------------------------------------------------------------------
# Source catalog
# ---------------------------------------------------------------------------

# Module path of each source kind relative to ``src/``, without extension.
SOURCE_MODULES: dict[ArtifactKind, str] = {
    ArtifactKind.LOGGER: "utils/logger",
    ArtifactKind.DATABASE: "config/db",
    ArtifactKind.SWAGGER: "config/swagger",
    ArtifactKind.TRANSACTION_ID: "middleware/transactionIdMiddleware",
    ArtifactKind.REQUEST_LOGGER: "middleware/loggerConsole",
    ArtifactKind.ERROR_HANDLER: "middleware/errorHandler",
    ArtifactKind.HEALTH_ROUTE: "routes/healthCheckRoute",
    ArtifactKind.APP: "app",
    ArtifactKind.SERVER: "server",
}

SOURCE_KINDS: tuple[ArtifactKind, ...] = tuple(SOURCE_MODULES)


def _bodies(typescript: str, esm: str, cjs: str) -> dict[VariantKey, str]:
    # Both TypeScript keys share one body; tsc emits the module format.
    return {
        VariantKey.TS_ESM: typescript,
        VariantKey.TS_CJS: typescript,
        VariantKey.JS_ESM: esm,
        VariantKey.JS_CJS: cjs,
    }


SOURCE_TEMPLATES: dict[ArtifactKind, dict[VariantKey, str]] = {
    ArtifactKind.LOGGER: _bodies(
        "source/logger/esm.j2", "source/logger/esm.j2", "source/logger/cjs.j2"
    ),
    ArtifactKind.DATABASE: _bodies(
        "source/database/typescript.j2", "source/database/esm.j2", "source/database/cjs.j2"
    ),
    ArtifactKind.SWAGGER: _bodies(
        "source/swagger/typescript.j2", "source/swagger/esm.j2", "source/swagger/cjs.j2"
    ),
    ArtifactKind.TRANSACTION_ID: _bodies(
        "source/transaction_id/typescript.j2",
        "source/transaction_id/esm.j2",
        "source/transaction_id/cjs.j2",
    ),
    ArtifactKind.REQUEST_LOGGER: _bodies(
        "source/request_logger/typescript.j2",
        "source/request_logger/esm.j2",
        "source/request_logger/cjs.j2",
    ),
    ArtifactKind.ERROR_HANDLER: _bodies(
        "source/error_handler/typescript.j2",
        "source/error_handler/esm.j2",
        "source/error_handler/cjs.j2",
    ),
    ArtifactKind.HEALTH_ROUTE: _bodies(
        "source/health_route/esm.j2", "source/health_route/esm.j2", "source/health_route/cjs.j2"
    ),
    ArtifactKind.APP: _bodies(
        "source/app/typescript.j2", "source/app/esm.j2", "source/app/cjs.j2"
    ),
    ArtifactKind.SERVER: _bodies(
        "source/server/typescript.j2", "source/server/esm.j2", "source/server/cjs.j2"
    ),
}

DEPLOY_TEMPLATES: dict[ArtifactKind, str] = {
    ArtifactKind.DOCKERFILE: "deploy/Dockerfile.j2",
    ArtifactKind.COMPOSE: "deploy/docker-compose.yml.j2",
    ArtifactKind.JENKINS: "deploy/Jenkinsfile.j2",
    ArtifactKind.GITHUB_ACTIONS: "deploy/ci.yml.j2",
}

ENV_TEMPLATE = "config/env.j2"

# npm packages the generated sources import, whatever the user selected.
SOURCE_DEPENDENCIES: tuple[PackageName, ...] = (
    PackageName.EXPRESS,
    PackageName.DOTENV,
    PackageName.CORS,
    PackageName.COOKIE_PARSER,
    PackageName.UUID,
    PackageName.SWAGGER_UI_EXPRESS,
    PackageName.WINSTON,
)

# Type packages installed for TypeScript projects when the runtime package is.
TYPE_PACKAGES: dict[PackageName, str] = {
    PackageName.EXPRESS: "@types/express",
    PackageName.CORS: "@types/cors",
    PackageName.COOKIE_PARSER: "@types/cookie-parser",
    PackageName.MORGAN: "@types/morgan",
    PackageName.BCRYPT: "@types/bcrypt",
    PackageName.SWAGGER_UI_EXPRESS: "@types/swagger-ui-express",
    PackageName.UUID: "@types/uuid",
    PackageName.COMPRESSION: "@types/compression",
    PackageName.JSONWEBTOKEN: "@types/jsonwebtoken",
    PackageName.PASSPORT: "@types/passport",
    PackageName.MULTER: "@types/multer",
}

TYPESCRIPT_TOOLING: tuple[str, ...] = ("typescript", "ts-node", "ts-node-dev", "@types/node")
JAVASCRIPT_TOOLING: tuple[str, ...] = ("nodemon",)


def source_path(kind: ArtifactKind, variant: VariantKey) -> str:
    """Project-relative path of a source artifact, e.g. ``src/app.ts``."""
    return f"{SOURCE_ROOT}/{SOURCE_MODULES[kind]}.{variant.source_extension}"


def import_specifier(kind: ArtifactKind, suffix: str) -> str:
    """Relative specifier used to import *kind* from a file in ``src/``."""
    return f"./{SOURCE_MODULES[kind]}{suffix}"


# ---------------------------------------------------------------------------
# Template parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateParams:
    """The parameter record every renderer of one run receives.

    Build it with :meth:`for_variant` so the import suffix is derived from the
    variant exactly once and shared by every import statement.
    """

    variant: VariantKey
    project_name: str
    port: int
    api_version: str
    import_suffix: str

    @classmethod
    def for_variant(
        cls,
        variant: VariantKey,
        *,
        project_name: str,
        port: int,
        api_version: str = DEFAULT_API_VERSION,
    ) -> "TemplateParams":
        return cls(
            variant=variant,
            project_name=project_name,
            port=int(port),
            api_version=api_version,
            import_suffix=variant.import_suffix,
        )

    @classmethod
    def from_config(
        cls, config: ProjectConfig, variant: VariantKey | None = None
    ) -> "TemplateParams":
        if variant is None:
            variant = select_variant(config.language, config.module_system)
        return cls.for_variant(
            variant,
            project_name=config.name,
            port=config.port,
            api_version=config.api_version,
        )

    @property
    def imports(self) -> dict[str, str]:
        """Specifier for every importable source, keyed by kind value."""
        return {
            kind.value: import_specifier(kind, self.import_suffix)
            for kind in SOURCE_KINDS
        }

    def context(self) -> dict[str, Any]:
        """Return the Jinja2 template context."""
        return {
            "project_name": self.project_name,
            "port": str(self.port),
            "api_version": self.api_version,
            "fallback_api_version": FALLBACK_API_VERSION,
            "import_suffix": self.import_suffix,
            "imports": self.imports,
            "typescript": self.variant.is_typescript,
            "esm": self.variant.is_esm,
            "node_version": NODE_VERSION,
        }


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

_renderer = TemplateRenderer()


def source_template(kind: ArtifactKind, variant: VariantKey) -> str:
    """Template path registered for (*kind*, *variant*)."""
    try:
        return SOURCE_TEMPLATES[kind][variant]
    except KeyError as exc:
        raise KeyError(f"No template registered for {kind.value} / {variant.value}") from exc


def render_source(kind: ArtifactKind, params: TemplateParams) -> str:
    """Render the source body of *kind* for ``params.variant``."""
    return _renderer.render(source_template(kind, params.variant), params.context())


def render_deployment(kind: ArtifactKind, params: TemplateParams) -> str:
    """Render a deployment descriptor (Dockerfile, compose, Jenkins, CI)."""
    return _renderer.render(DEPLOY_TEMPLATES[kind], params.context())


def render_env_file(params: TemplateParams) -> str:
    return _renderer.render(ENV_TEMPLATE, params.context())


def dump_json(data: Mapping[str, Any]) -> str:
    """Serialise *data* the way npm writes ``package.json``: 2-space indent."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def initial_manifest(project_name: str) -> dict[str, Any]:
    """The manifest ``npm init -y`` creates for *project_name*."""
    return {
        "name": project_name,
        "version": "1.0.0",
        "description": "",
        "main": "index.js",
        "scripts": {
            "test": 'echo "Error: no test specified" && exit 1',
        },
        "keywords": [],
        "author": "",
        "license": "ISC",
    }


# Launch commands per variant: (start, dev).
LAUNCH_COMMANDS: dict[VariantKey, tuple[str, str]] = {
    VariantKey.TS_ESM: ("node dist/server.js", "node --loader ts-node/esm src/server.ts"),
    VariantKey.TS_CJS: ("node dist/server.js", "ts-node src/server.ts"),
    VariantKey.JS_ESM: ("node src/server.js", "nodemon src/server.js"),
    VariantKey.JS_CJS: ("node src/server.js", "nodemon src/server.js"),
}


def manifest_amendment(variant: VariantKey) -> dict[str, Any]:
    """Fields merged into ``package.json`` after dependencies are installed."""
    start, dev = LAUNCH_COMMANDS[variant]
    scripts: dict[str, str] = {"start": start, "dev": dev}
    if variant.is_typescript:
        scripts["build"] = "tsc"

    patch: dict[str, Any] = {}
    if variant.is_esm:
        patch["type"] = "module"
    patch["scripts"] = scripts
    return patch


def tsconfig(variant: VariantKey) -> dict[str, Any]:
    """Compiler options for a TypeScript variant."""
    esm = variant.is_esm
    options: dict[str, Any] = {
        "target": "ES2020",
        "module": "NodeNext" if esm else "CommonJS",
        "moduleResolution": "NodeNext" if esm else "Node",
        "outDir": "dist",
        "rootDir": "./src",
        "strict": True,
        "esModuleInterop": True,
        "forceConsistentCasingInFileNames": True,
    }
    if esm:
        options["allowSyntheticDefaultImports"] = True
    return {
        "compilerOptions": options,
        "include": ["src/**/*.ts"],
        "exclude": ["node_modules"],
    }


def runtime_packages(config: ProjectConfig) -> list[str]:
    """User-selected packages plus those the generated sources import."""
    wanted = set(config.packages) | set(SOURCE_DEPENDENCIES)
    return [pkg.value for pkg in PackageName if pkg in wanted]


def dev_packages(variant: VariantKey, runtime: list[str]) -> list[str]:
    """Development dependencies for *variant* given the installed runtime packages."""
    if not variant.is_typescript:
        return list(JAVASCRIPT_TOOLING)
    types = [
        TYPE_PACKAGES[pkg]
        for pkg in PackageName
        if pkg.value in runtime and pkg in TYPE_PACKAGES
    ]
    return [*TYPESCRIPT_TOOLING, *types]
