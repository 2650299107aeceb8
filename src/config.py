"""TS-Nodify tool configuration.

Settings that control how the scaffolder runs (where projects go, which
package manager to call, how long installs may take), as opposed to the
per-project choices collected by the wizard.  All settings use Pydantic v2
models so they are validated at construction time.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field


_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global TS-Nodify configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the generator and emitter.
    """

    output_dir: Path = Field(default=Path("."), description="Parent directory of generated projects")
    package_manager: str = Field(default="npm", min_length=1, description="Package manager executable")
    install_timeout: int = Field(
        default=600, ge=10, description="Per-command package install timeout in seconds"
    )
    skip_install: bool = Field(
        default=False, description="Write files without running the package manager"
    )

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            NODIFY_OUTPUT_DIR, NODIFY_PACKAGE_MANAGER, NODIFY_INSTALL_TIMEOUT,
            NODIFY_SKIP_INSTALL.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("NODIFY_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["NODIFY_OUTPUT_DIR"])
        if os.environ.get("NODIFY_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["NODIFY_PACKAGE_MANAGER"]
        if os.environ.get("NODIFY_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = os.environ["NODIFY_INSTALL_TIMEOUT"]
        if os.environ.get("NODIFY_SKIP_INSTALL"):
            kwargs["skip_install"] = os.environ["NODIFY_SKIP_INSTALL"].strip().lower() in _TRUTHY
        return cls(**kwargs)
