from __future__ import annotations

import tomllib
from datetime import date, datetime
from pathlib import Path

import pytest

from meteopanel import __release_date__, __version__, __version_info__
from meteopanel.__version__ import RELEASE_NOTES, __supported_languages__
from meteopanel.presentation.i18n import LOCALES_DIR, Localization

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(scope="module")
def pyproject() -> dict:
    return tomllib.loads((PROJECT_ROOT / "pyproject.toml").read_text("utf-8"))


def test_version_matches_packaging(pyproject) -> None:
    assert pyproject["project"]["version"] == __version__
    assert __version_info__ == tuple(int(p) for p in __version__.split("."))


def test_readme_badge_and_release_notes() -> None:
    readme = (PROJECT_ROOT / "README.md").read_text(encoding="utf-8")
    assert f"version-{__version__}-blue" in readme
    assert f"New in {__version__}" in RELEASE_NOTES


def test_runtime_dependencies_are_declared(pyproject) -> None:
    declared = " ".join(pyproject["project"]["dependencies"])
    for name in ("httpx", "pydantic", "python-dotenv", "pytz"):
        assert name in declared
    assert any(
        dep.startswith("pytest")
        for dep in pyproject["project"]["optional-dependencies"]["test"]
    )


def test_release_date_is_recent() -> None:
    release = datetime.strptime(__release_date__, "%d.%m.%Y").date()
    age = (date.today() - release).days
    assert 0 <= age < 730, f"Release date {__release_date__} looks wrong"


def test_supported_languages_match_locales() -> None:
    languages = Localization().get_available_languages()
    assert len(languages) == len(__supported_languages__.split(", "))


def test_locales_ship_with_the_package(pyproject) -> None:
    package_dir = PROJECT_ROOT / "meteopanel"
    assert LOCALES_DIR == package_dir.resolve() / "locales"
    assert sorted(p.stem for p in LOCALES_DIR.glob("*.json")) == ["de", "en", "ru"]
    package_data = pyproject["tool"]["setuptools"]["package-data"]
    assert "locales/*.json" in package_data["meteopanel"]
