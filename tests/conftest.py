import os
import sys
import types
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from stiquery.api.main import app
from stiquery.core.config import GeneratorSettings
from stiquery.core.generators import QueryInheritanceBuilder
from stiquery.core.observability.metrics import reset_metrics
from stiquery.core.schema import load_database

FIXTURES = Path(__file__).resolve().parent / "fixtures"

_ENV_KEYS = (
    "STIQUERY_ADD_TIMESTAMP",
    "STIQUERY_VERSION",
    "STIQUERY_TARGET_LANGUAGE",
    "STIQUERY_UNRESOLVED_ANCESTOR",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Generator settings come from the environment; keep tests deterministic
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    reset_metrics()


@pytest.fixture()
def company_schema_path() -> Path:
    return FIXTURES / "company.yaml"


@pytest.fixture()
def company_db(company_schema_path):
    return load_database(company_schema_path)


@pytest.fixture()
def employee(company_db):
    return company_db.get_table("employee")


@pytest.fixture()
def php_builder():
    return QueryInheritanceBuilder(GeneratorSettings(language="php"))


@pytest.fixture()
def python_builder():
    return QueryInheritanceBuilder(GeneratorSettings(language="python"))


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def install_module(monkeypatch):
    """
    Registers an in-memory module (and its parent packages) in sys.modules
    for the duration of a test, so generated Python sources can import it.
    """

    def _install(name: str, source: str = "", **attrs) -> types.ModuleType:
        parts = name.split(".")
        for i in range(1, len(parts)):
            parent = ".".join(parts[:i])
            if parent not in sys.modules:
                pkg = types.ModuleType(parent)
                pkg.__path__ = []
                monkeypatch.setitem(sys.modules, parent, pkg)

        module = types.ModuleType(name)
        module.__dict__.update(attrs)
        monkeypatch.setitem(sys.modules, name, module)
        if source:
            exec(compile(source, name.replace(".", os.sep) + ".py", "exec"), module.__dict__)
        return module

    return _install
