"""Pytest configuration and fixtures."""

import textwrap
from pathlib import Path

import pytest
from dotenv import load_dotenv

from jython_complete.parsing.type_inference import TypeInferenceContext, TypeInferenceEngine
from jython_complete.providers import (
    CatalogReflectionProvider,
    HostCatalog,
    StaticBuiltinIndex,
)

# Load .env file at test collection time
load_dotenv(Path(__file__).parent.parent / ".env")


HOST_CATALOG = {
    "classes": {
        "java.lang.Object": {
            "members": [
                {"name": "toString", "type": "java.lang.String"},
                {"name": "hashCode", "type": "int"},
            ]
        },
        "java.lang.String": {
            "superclass": "java.lang.Object",
            "members": [
                {"name": "length", "type": "int"},
                {"name": "toUpperCase", "type": "java.lang.String"},
                {"name": "valueOf", "static": True, "type": "java.lang.String",
                 "parameters": ["java.lang.Object"]},
            ],
        },
        "java.lang.Integer": {
            "superclass": "java.lang.Object",
            "members": [
                {"name": "intValue", "type": "int"},
                {"name": "doubleValue", "type": "double"},
                {"name": "valueOf", "static": True, "type": "java.lang.Integer",
                 "parameters": ["int"]},
                {"name": "MAX_VALUE", "kind": "field", "static": True, "type": "int"},
            ],
        },
        "demo.Box": {
            "members": [
                {"name": "getSize", "type": "java.lang.Integer"},
                {"name": "width", "kind": "field", "type": "int"},
            ]
        },
        "ij.IJ": {
            "members": [
                {"name": "getImage", "static": True, "type": "ij.ImagePlus"},
                {"name": "log", "static": True, "type": "void",
                 "parameters": ["java.lang.String"]},
            ]
        },
        "ij.ImagePlus": {
            "superclass": "java.lang.Object",
            "members": [
                {"name": "getStack", "type": "ij.ImageStack"},
                {"name": "getTitle", "type": "java.lang.String"},
                {"name": "setTitle", "type": "void", "parameters": ["java.lang.String"]},
                {"name": "show", "type": "void"},
            ],
        },
        "ij.ImageStack": {
            "members": [
                {"name": "getSize", "type": "int"},
                {"name": "getProcessor", "type": "ij.process.ImageProcessor",
                 "parameters": ["int"]},
            ]
        },
        "ij.gui.Roi": {
            "members": [
                {"name": "contains", "type": "boolean", "parameters": ["int", "int"]},
                {"name": "getBounds", "type": "java.awt.Rectangle"},
            ]
        },
    }
}

BUILTIN_ENTRIES = [
    "__builtin__.len",
    "__builtin__.str",
    "__builtin__.str.join",
    "__builtin__.str.upper",
    "__builtin__.dict",
    "__builtin__.dict.keys",
]


class StubModuleIndex:
    """Dict-backed module index."""

    def __init__(self, modules: dict[str, list[str]] | None = None):
        self.modules = dict(modules or {})
        self.cleared = 0

    def module_members(self, module_path: str) -> list[str] | None:
        members = self.modules.get(module_path)
        return list(members) if members is not None else None

    def clear_all(self) -> None:
        self.cleared += 1


def dedent(source: str) -> str:
    return textwrap.dedent(source).lstrip("\n")


@pytest.fixture
def reflection() -> CatalogReflectionProvider:
    return CatalogReflectionProvider(HostCatalog.model_validate(HOST_CATALOG))


@pytest.fixture
def module_index() -> StubModuleIndex:
    return StubModuleIndex({
        "os": ["path", "getcwd", "sep"],
        "os.path": ["join", "exists"],
        "mylib": ["helper", "Thing"],
    })


@pytest.fixture
def builtin_index() -> StaticBuiltinIndex:
    return StaticBuiltinIndex(BUILTIN_ENTRIES)


@pytest.fixture
def context(reflection, module_index, builtin_index) -> TypeInferenceContext:
    return TypeInferenceContext(
        reflection=reflection,
        modules=module_index,
        builtins=builtin_index,
    )


@pytest.fixture
def engine(context) -> TypeInferenceEngine:
    return TypeInferenceEngine(context=context)


@pytest.fixture
def build(engine):
    """Build the root scope of a (dedented) script."""

    def _build(source: str):
        return engine.build_scope_from_source(dedent(source))

    return _build
