"""Variant selection for generated sources.

Every language-dependent artifact is keyed by a :class:`VariantKey`, the
closed set of language x module-system combinations.  Renderers branch on the
key and its traits only, never on the raw configuration fields, so a new
combination is added here and nowhere else.
"""

from __future__ import annotations

from enum import Enum

from .models import Language, ModuleSystem


class VariantKey(str, Enum):
    """Syntactic flavour a generated source file must follow."""
    TS_ESM = "ts-esm"
    TS_CJS = "ts-cjs"
    JS_ESM = "js-esm"
    JS_CJS = "js-cjs"

    @property
    def language(self) -> Language:
        return Language.TYPESCRIPT if self.value.startswith("ts") else Language.JAVASCRIPT

    @property
    def module_system(self) -> ModuleSystem:
        return ModuleSystem.ESM if self.value.endswith("esm") else ModuleSystem.COMMONJS

    @property
    def is_typescript(self) -> bool:
        return self.language is Language.TYPESCRIPT

    @property
    def is_esm(self) -> bool:
        return self.module_system is ModuleSystem.ESM

    @property
    def source_extension(self) -> str:
        """File extension of generated sources, without the dot."""
        return "ts" if self.is_typescript else "js"

    @property
    def import_suffix(self) -> str:
        """Suffix appended to relative import specifiers.

        Node's ESM resolver needs explicit ``.js`` extensions (TypeScript
        maps ``.js`` back to the ``.ts`` source); CommonJS resolves bare paths.
        """
        return ".js" if self.is_esm else ""


_SELECTION: dict[tuple[Language, ModuleSystem], VariantKey] = {
    (Language.TYPESCRIPT, ModuleSystem.ESM): VariantKey.TS_ESM,
    (Language.TYPESCRIPT, ModuleSystem.COMMONJS): VariantKey.TS_CJS,
    (Language.JAVASCRIPT, ModuleSystem.ESM): VariantKey.JS_ESM,
    (Language.JAVASCRIPT, ModuleSystem.COMMONJS): VariantKey.JS_CJS,
}


def select_variant(language: Language, module_system: ModuleSystem) -> VariantKey:
    """Map a (language, module system) pair onto its variant key."""
    return _SELECTION[(Language(language), ModuleSystem(module_system))]
