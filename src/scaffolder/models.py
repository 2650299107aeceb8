"""Pydantic v2 models for the project scaffolder.

Defines the user-facing choices (language, module system, packages, port,
deployment helpers) and the validated ``ProjectConfig`` that every other part
of the scaffolder consumes.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(ValueError):
    """Raised when a user-supplied configuration value is invalid.

    Subclasses ``ValueError`` so pydantic field validators turn it into a
    regular ``ValidationError``.
    """


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Language(str, Enum):
    """Source language of the generated project."""
    TYPESCRIPT = "TypeScript"
    JAVASCRIPT = "JavaScript"


class ModuleSystem(str, Enum):
    """Module system used by the generated sources."""
    ESM = "ES Modules"
    COMMONJS = "CommonJS"


class DeploymentHelper(str, Enum):
    """Optional deployment descriptors that can be generated."""
    DOCKERFILE = "dockerfile"
    COMPOSE = "compose"
    JENKINS = "jenkins"
    GITHUB_ACTIONS = "github"


class PackageName(str, Enum):
    """Recognised npm packages offered by the wizard, in display order."""
    # Core
    EXPRESS = "express"
    DOTENV = "dotenv"
    CORS = "cors"
    MONGOOSE = "mongoose"
    PRISMA = "prisma"
    MORGAN = "morgan"
    WINSTON = "winston"
    UUID = "uuid"
    BCRYPT = "bcrypt"
    SWAGGER_UI_EXPRESS = "swagger-ui-express"
    COOKIE_PARSER = "cookie-parser"
    # Extra
    HELMET = "helmet"
    COMPRESSION = "compression"
    EXPRESS_RATE_LIMIT = "express-rate-limit"
    JOI = "joi"
    ZOD = "zod"
    AXIOS = "axios"
    JSONWEBTOKEN = "jsonwebtoken"
    PASSPORT = "passport"
    MULTER = "multer"
    SOCKET_IO = "socket.io"


DEFAULT_PACKAGES: frozenset[PackageName] = frozenset({
    PackageName.EXPRESS,
    PackageName.DOTENV,
    PackageName.CORS,
    PackageName.MONGOOSE,
    PackageName.MORGAN,
    PackageName.WINSTON,
    PackageName.UUID,
    PackageName.BCRYPT,
    PackageName.SWAGGER_UI_EXPRESS,
    PackageName.COOKIE_PARSER,
})

DEFAULT_DEPLOYMENT_HELPERS: frozenset[DeploymentHelper] = frozenset({
    DeploymentHelper.DOCKERFILE,
    DeploymentHelper.COMPOSE,
})

DEFAULT_PROJECT_NAME = "my-node-app"
DEFAULT_PORT = 3000
DEFAULT_API_VERSION = "v1"


# ---------------------------------------------------------------------------
# Field-level validators (shared with the interactive prompts)
# ---------------------------------------------------------------------------

_SAFE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_API_VERSION = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def validate_project_name(value: str) -> str:
    """Return the stripped project name or raise ``ConfigurationError``.

    Names end up as a directory name, a ``package.json`` name and a container
    name, so only letters, digits, ``.``, ``_`` and ``-`` are allowed.
    """
    name = str(value).strip()
    if not name:
        raise ConfigurationError("Project name must not be empty")
    if name in (".", "..") or not _SAFE_NAME.match(name):
        raise ConfigurationError(
            f"Invalid project name '{name}': use letters, digits, '.', '_' or '-' "
            "and start with a letter or digit"
        )
    return name


def validate_port(value: Any) -> int:
    """Parse *value* as a TCP port in the open range (0, 65536)."""
    if isinstance(value, bool):
        raise ConfigurationError("Please enter a valid port number")
    if isinstance(value, int):
        port = value
    else:
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            raise ConfigurationError("Please enter a valid port number")
        port = int(text, 10)
    if not 0 < port < 65536:
        raise ConfigurationError("Please enter a valid port number")
    return port


def validate_api_version(value: str) -> str:
    """Return the stripped API version segment used in route prefixes."""
    version = str(value).strip()
    if not version or not _API_VERSION.match(version):
        raise ConfigurationError(f"Invalid API version '{value}'")
    return version


def parse_package(value: str | PackageName) -> PackageName:
    """Resolve a package name from the fixed catalog."""
    if isinstance(value, PackageName):
        return value
    try:
        return PackageName(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(f"Unknown package '{value}'") from exc


def parse_deployment_helper(value: str | DeploymentHelper) -> DeploymentHelper:
    """Resolve a deployment helper by value (``dockerfile``) or name (``Dockerfile``)."""
    if isinstance(value, DeploymentHelper):
        return value
    text = str(value).strip()
    for helper in DeploymentHelper:
        if text.lower() in (helper.value, helper.name.lower()):
            return helper
    raise ConfigurationError(f"Unknown deployment helper '{value}'")


# ---------------------------------------------------------------------------
# ProjectConfig
# ---------------------------------------------------------------------------


class ProjectConfig(BaseModel):
    """Validated description of the project to scaffold.

    Instances are immutable.  CommonJS is a reserved module system: the
    templates carry CommonJS bodies but the configuration boundary rejects it
    until it is explicitly supported.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default=DEFAULT_PROJECT_NAME, description="Project directory and package name")
    language: Language = Field(default=Language.TYPESCRIPT, description="Source language")
    module_system: ModuleSystem = Field(default=ModuleSystem.ESM, description="Module system")
    packages: frozenset[PackageName] = Field(
        default=DEFAULT_PACKAGES,
        description="npm packages selected by the user",
    )
    port: int = Field(default=DEFAULT_PORT, description="HTTP port of the generated server")
    deployment_helpers: frozenset[DeploymentHelper] = Field(
        default=DEFAULT_DEPLOYMENT_HELPERS,
        description="Deployment descriptors to generate",
    )
    api_version: str = Field(default=DEFAULT_API_VERSION, description="API route version segment")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return validate_project_name(value)

    @field_validator("module_system")
    @classmethod
    def _check_module_system(cls, value: ModuleSystem) -> ModuleSystem:
        if value is ModuleSystem.COMMONJS:
            raise ConfigurationError(
                "CommonJS (require/module.exports) will be supported in future releases"
            )
        return value

    @field_validator("packages", mode="before")
    @classmethod
    def _check_packages(cls, value: Any) -> frozenset[PackageName]:
        if isinstance(value, (str, PackageName)):
            value = [value]
        return frozenset(parse_package(item) for item in value)

    @field_validator("port", mode="before")
    @classmethod
    def _check_port(cls, value: Any) -> int:
        return validate_port(value)

    @field_validator("deployment_helpers", mode="before")
    @classmethod
    def _check_helpers(cls, value: Any) -> frozenset[DeploymentHelper]:
        if isinstance(value, (str, DeploymentHelper)):
            value = [value]
        return frozenset(parse_deployment_helper(item) for item in value)

    @field_validator("api_version", mode="before")
    @classmethod
    def _check_api_version(cls, value: Any) -> str:
        return validate_api_version(value)

    # -- Derived views -----------------------------------------------------

    @property
    def ordered_packages(self) -> list[PackageName]:
        """Selected packages in catalog order."""
        return [pkg for pkg in PackageName if pkg in self.packages]

    def wants(self, helper: DeploymentHelper) -> bool:
        """Return ``True`` if *helper* was selected."""
        return helper in self.deployment_helpers

    def renamed(self, new_name: str) -> "ProjectConfig":
        """Return a validated copy of this config under *new_name*."""
        data = self.model_dump()
        data["name"] = new_name
        return type(self).model_validate(data)
