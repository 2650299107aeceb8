"""Tests for the template catalog (src.scaffolder.catalog).

Covers:
- Every source kind has a template for every variant key
- Import suffix consistency across all renderers of one run
- Port and API version literals in generated code
- package.json, tsconfig.json and .env content
- Runtime / development package selection
"""

from __future__ import annotations

import json
import re

import pytest

from src.scaffolder.catalog import (
    FALLBACK_API_VERSION,
    LAUNCH_COMMANDS,
    SOURCE_KINDS,
    SOURCE_MODULES,
    SOURCE_TEMPLATES,
    ArtifactKind,
    TemplateParams,
    dev_packages,
    dump_json,
    import_specifier,
    initial_manifest,
    manifest_amendment,
    render_deployment,
    render_env_file,
    render_source,
    runtime_packages,
    source_path,
    source_template,
    tsconfig,
)
from src.scaffolder.models import PackageName, ProjectConfig
from src.scaffolder.templates import TemplateRenderer
from src.scaffolder.variants import VariantKey


pytestmark = pytest.mark.unit

_ESM_DEFAULT_IMPORT = re.compile(r"""^import\s+\w+\s+from\s+['"](\./[^'"]+)['"]""", re.M)
_CJS_DEFAULT_REQUIRE = re.compile(r"""^const\s+\w+\s*=\s*require\(['"](\./[^'"]+)['"]\)""", re.M)
_ESM_DEFAULT_EXPORT = re.compile(r"^export default ", re.M)
_CJS_DEFAULT_EXPORT = re.compile(r"^module\.exports = (?!\{)", re.M)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class TestRegistration:
    def test_every_kind_defines_all_variants(self):
        template_dir = TemplateRenderer().template_dir
        for kind in SOURCE_KINDS:
            assert set(SOURCE_TEMPLATES[kind]) == set(VariantKey), kind
            for variant in VariantKey:
                assert (template_dir / source_template(kind, variant)).is_file()

    def test_typescript_keys_share_bodies(self):
        for kind in SOURCE_KINDS:
            assert (
                source_template(kind, VariantKey.TS_ESM)
                == source_template(kind, VariantKey.TS_CJS)
            ), kind

    def test_logger_shared_between_esm_keys(self):
        assert (
            source_template(ArtifactKind.LOGGER, VariantKey.TS_ESM)
            == source_template(ArtifactKind.LOGGER, VariantKey.JS_ESM)
        )

    def test_unregistered_kind_raises(self):
        with pytest.raises(KeyError):
            source_template(ArtifactKind.DOCKERFILE, VariantKey.TS_ESM)

    @pytest.mark.parametrize(
        "kind,variant,expected",
        [
            (ArtifactKind.APP, VariantKey.TS_ESM, "src/app.ts"),
            (ArtifactKind.SERVER, VariantKey.JS_ESM, "src/server.js"),
            (ArtifactKind.LOGGER, VariantKey.JS_CJS, "src/utils/logger.js"),
            (
                ArtifactKind.TRANSACTION_ID,
                VariantKey.TS_CJS,
                "src/middleware/transactionIdMiddleware.ts",
            ),
        ],
    )
    def test_source_path(self, kind, variant, expected):
        assert source_path(kind, variant) == expected

    def test_import_specifier(self):
        assert import_specifier(ArtifactKind.APP, ".js") == "./app.js"
        assert import_specifier(ArtifactKind.DATABASE, "") == "./config/db"


# ---------------------------------------------------------------------------
# Cross-file consistency
# ---------------------------------------------------------------------------


class TestImportConsistency:
    @pytest.mark.parametrize("variant", list(VariantKey))
    def test_every_relative_import_uses_variant_suffix(
        self, variant, render_all_sources, relative_imports
    ):
        rendered = render_all_sources(variant)
        specifiers = [spec for body in rendered.values() for spec in relative_imports(body)]
        assert specifiers, "app and server entries import sibling modules"

        modules = set(SOURCE_MODULES.values())
        for spec in specifiers:
            if variant.is_esm:
                assert spec.endswith(".js"), spec
                module = spec[len("./"):-len(".js")]
            else:
                assert not spec.endswith((".js", ".ts")), spec
                module = spec[len("./"):]
            assert module in modules, spec

    @pytest.mark.parametrize("variant", list(VariantKey))
    def test_default_imports_have_default_exports(self, variant, render_all_sources):
        rendered = render_all_sources(variant)
        kinds_by_module = {module: kind for kind, module in SOURCE_MODULES.items()}
        checked = 0
        for body in rendered.values():
            for pattern, export in (
                (_ESM_DEFAULT_IMPORT, _ESM_DEFAULT_EXPORT),
                (_CJS_DEFAULT_REQUIRE, _CJS_DEFAULT_EXPORT),
            ):
                for spec in pattern.findall(body):
                    module = spec[len("./"):]
                    if variant.import_suffix:
                        module = module[:-len(variant.import_suffix)]
                    target = rendered[kinds_by_module[module].value]
                    assert export.search(target), (variant, spec)
                    checked += 1
        # app, logger and health route are default-imported
        assert checked == 3

    @pytest.mark.parametrize("variant", [VariantKey.TS_ESM, VariantKey.TS_CJS])
    def test_typescript_bodies_use_es_syntax(self, variant, render_all_sources):
        for kind, body in render_all_sources(variant).items():
            assert "module.exports" not in body, kind
            assert "require(" not in body, kind

    @pytest.mark.parametrize("variant", list(VariantKey))
    def test_app_and_server_share_suffix(self, variant, render_all_sources, relative_imports):
        rendered = render_all_sources(variant)
        app_specs = relative_imports(rendered[ArtifactKind.APP.value])
        server_specs = relative_imports(rendered[ArtifactKind.SERVER.value])
        suffixes = {spec.endswith(".js") for spec in app_specs + server_specs}
        assert suffixes == {variant.is_esm}

    def test_params_built_once_per_variant(self):
        params = TemplateParams.for_variant(VariantKey.TS_ESM, project_name="x", port=1)
        assert params.import_suffix == ".js"
        assert all(spec.endswith(".js") for spec in params.imports.values())
        assert set(params.imports) == {kind.value for kind in SOURCE_KINDS}

    def test_javascript_esm_has_no_commonjs(self, render_all_sources):
        for body in render_all_sources(VariantKey.JS_ESM).values():
            assert "require(" not in body
            assert "module.exports" not in body

    def test_javascript_cjs_has_no_esm(self, render_all_sources):
        for body in render_all_sources(VariantKey.JS_CJS).values():
            assert not any(
                line.startswith(("import ", "export ")) for line in body.splitlines()
            )

    def test_typescript_only_in_typescript_keys(self, render_all_sources):
        ts_server = render_all_sources(VariantKey.TS_ESM)[ArtifactKind.SERVER.value]
        js_server = render_all_sources(VariantKey.JS_ESM)[ArtifactKind.SERVER.value]
        assert "PORT: number" in ts_server
        assert "PORT: number" not in js_server


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------


class TestLiterals:
    def test_port_rendered_as_integer_literal(self, render_all_sources):
        server = render_all_sources(VariantKey.TS_ESM, port=4000)[ArtifactKind.SERVER.value]
        assert "|| 4000;" in server

    def test_port_from_padded_input(self):
        config = ProjectConfig(name="demo-app", port="04000")
        server = render_source(ArtifactKind.SERVER, TemplateParams.from_config(config))
        assert "|| 4000;" in server
        assert "04000" not in server

    @pytest.mark.parametrize("variant", list(VariantKey))
    def test_api_version_fallback(self, variant, render_all_sources):
        app = render_all_sources(variant, api_version="v7")[ArtifactKind.APP.value]
        assert FALLBACK_API_VERSION == "v1"
        assert "API_VERSION || 'v1'" in app
        assert "v7" not in app

    def test_swagger_title_uses_project_name(self, render_all_sources):
        swagger = render_all_sources(VariantKey.JS_ESM, project_name="shop")[ArtifactKind.SWAGGER.value]
        assert "shop API Docs" in swagger

    def test_rendering_is_pure(self, render_all_sources):
        assert render_all_sources(VariantKey.TS_ESM) == render_all_sources(VariantKey.TS_ESM)


# ---------------------------------------------------------------------------
# JSON & env artifacts
# ---------------------------------------------------------------------------


class TestConfigArtifacts:
    def test_dump_json_format(self):
        assert dump_json({"a": {"b": 1}}) == '{\n  "a": {\n    "b": 1\n  }\n}\n'

    def test_initial_manifest(self):
        manifest = initial_manifest("demo-app")
        assert manifest["name"] == "demo-app"
        assert manifest["version"] == "1.0.0"
        assert manifest["main"] == "index.js"
        assert manifest["license"] == "ISC"
        assert "test" in manifest["scripts"]
        assert "type" not in manifest

    @pytest.mark.parametrize("variant", list(VariantKey))
    def test_manifest_amendment(self, variant):
        patch = manifest_amendment(variant)
        start, dev = LAUNCH_COMMANDS[variant]
        assert patch["scripts"]["start"] == start
        assert patch["scripts"]["dev"] == dev
        assert (patch.get("type") == "module") is variant.is_esm
        assert ("build" in patch["scripts"]) is variant.is_typescript

    def test_launch_commands(self):
        assert LAUNCH_COMMANDS[VariantKey.TS_ESM] == (
            "node dist/server.js",
            "node --loader ts-node/esm src/server.ts",
        )
        assert LAUNCH_COMMANDS[VariantKey.TS_CJS][1] == "ts-node src/server.ts"
        assert LAUNCH_COMMANDS[VariantKey.JS_ESM] == ("node src/server.js", "nodemon src/server.js")

    def test_tsconfig_esm(self):
        options = tsconfig(VariantKey.TS_ESM)["compilerOptions"]
        assert options["module"] == "NodeNext"
        assert options["moduleResolution"] == "NodeNext"
        assert options["allowSyntheticDefaultImports"] is True
        assert options["outDir"] == "dist"
        assert options["rootDir"] == "./src"

    def test_tsconfig_cjs(self):
        data = tsconfig(VariantKey.TS_CJS)
        assert data["compilerOptions"]["module"] == "CommonJS"
        assert data["compilerOptions"]["moduleResolution"] == "Node"
        assert "allowSyntheticDefaultImports" not in data["compilerOptions"]
        assert data["include"] == ["src/**/*.ts"]
        assert json.loads(dump_json(data)) == data

    def test_env_file(self):
        params = TemplateParams.for_variant(
            VariantKey.JS_ESM, project_name="demo", port=8080, api_version="v2"
        )
        assert render_env_file(params) == "PORT=8080\nDB_URI=\nAPI_VERSION=v2\n"


# ---------------------------------------------------------------------------
# Deployment descriptors
# ---------------------------------------------------------------------------


class TestDeploymentTemplates:
    def test_dockerfile_build_stage_only_for_typescript(self):
        ts = TemplateParams.for_variant(VariantKey.TS_ESM, project_name="demo", port=4000)
        js = TemplateParams.for_variant(VariantKey.JS_ESM, project_name="demo", port=4000)
        ts_docker = render_deployment(ArtifactKind.DOCKERFILE, ts)
        js_docker = render_deployment(ArtifactKind.DOCKERFILE, js)
        assert "RUN npm run build" in ts_docker
        assert "RUN npm run build" not in js_docker
        assert "FROM node:20-alpine" in js_docker
        assert "EXPOSE 4000" in js_docker
        assert 'CMD ["npm", "start"]' in js_docker

    def test_jenkins_tag_lowercased(self):
        params = TemplateParams.for_variant(VariantKey.JS_ESM, project_name="My-App", port=3000)
        jenkins = render_deployment(ArtifactKind.JENKINS, params)
        assert "my-app:latest" in jenkins
        assert "stage('Build')" not in jenkins

    def test_compose_ports_and_container(self):
        params = TemplateParams.for_variant(VariantKey.TS_ESM, project_name="demo", port=5000)
        compose = render_deployment(ArtifactKind.COMPOSE, params)
        assert "container_name: demo" in compose
        assert '"5000:5000"' in compose
        assert "PORT=5000" in compose


# ---------------------------------------------------------------------------
# Packages
# ---------------------------------------------------------------------------


class TestPackages:
    def test_runtime_includes_source_dependencies(self, demo_config):
        assert runtime_packages(demo_config) == [
            "express",
            "dotenv",
            "cors",
            "winston",
            "uuid",
            "swagger-ui-express",
            "cookie-parser",
        ]

    def test_runtime_keeps_user_selection(self):
        config = ProjectConfig(packages=[PackageName.ZOD, PackageName.HELMET])
        runtime = runtime_packages(config)
        assert "zod" in runtime
        assert "helmet" in runtime
        assert runtime.index("helmet") < runtime.index("zod")

    def test_dev_packages_typescript(self, demo_config):
        dev = dev_packages(VariantKey.TS_ESM, runtime_packages(demo_config))
        assert dev[:4] == ["typescript", "ts-node", "ts-node-dev", "@types/node"]
        assert "@types/express" in dev
        assert "@types/cookie-parser" in dev
        assert "@types/bcrypt" not in dev

    def test_dev_types_follow_installed_packages(self):
        dev = dev_packages(VariantKey.TS_ESM, ["express", "bcrypt"])
        assert dev[4:] == ["@types/express", "@types/bcrypt"]

    def test_dev_packages_javascript(self):
        assert dev_packages(VariantKey.JS_ESM, ["express"]) == ["nodemon"]
