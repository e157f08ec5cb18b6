from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, EditorSettings
from domain.registry import IdentityRegistry


def _clear_shapegraph_env() -> None:
    for key in list(os.environ):
        if key.startswith("SHAPEGRAPH_"):
            os.environ.pop(key, None)


_clear_shapegraph_env()


@pytest.fixture(autouse=True)
def clear_shapegraph_env() -> Generator[None, None, None]:
    _clear_shapegraph_env()
    yield
    _clear_shapegraph_env()


@pytest.fixture
def registry() -> IdentityRegistry:
    return IdentityRegistry()


@pytest.fixture
def editor_settings() -> EditorSettings:
    return EditorSettings(
        equality_tolerance=1e-6,
        intersection_tolerance=0.01,
        legacy_shape="polygon",
        json_indent=True,
        log_level="WARNING",
    )


@pytest.fixture
def editor_settings_factory(
    editor_settings: EditorSettings,
) -> Callable[..., EditorSettings]:
    def _factory(**overrides: object) -> EditorSettings:
        return editor_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(editor_settings: EditorSettings) -> AppSettings:
    return AppSettings(editor=editor_settings)
