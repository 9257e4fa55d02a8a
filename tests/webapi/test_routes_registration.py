from langotron.webapi.routers.words import router

import pytest

pytestmark = pytest.mark.webapi


def test_words_router_includes_expected_paths() -> None:
    paths = {route.path for route in router.routes if getattr(route, "methods", None)}

    assert "/api/words" in paths
    assert "/api/words/search" in paths
    assert "/api/words/from-sentences" in paths
    assert "/api/words/lookup/{token}" in paths
    assert "/api/words/ensure" in paths
    assert "/api/words/{level}" in paths
    assert "/api/words/{level}/{word}" in paths
    assert "/api/words/store/{token}/ask" in paths
    assert "/api/words/store/{token}/generate-example" in paths


def test_fixed_post_paths_are_registered_before_level_creation() -> None:
    post_paths = [
        route.path for route in router.routes if "POST" in (getattr(route, "methods", None) or ())
    ]

    assert post_paths.index("/api/words/ensure") < post_paths.index("/api/words/{level}")
    assert post_paths.index("/api/words/from-sentences") < post_paths.index("/api/words/{level}")
