import pytest

from sumologic_connector.core.sumologic import URLConstructionError, build_url, render_path


def test_render_path_substitutes_and_escapes():
    path = render_path("/api/{api-version}/users/{user-id}", {"api-version": "v1", "user-id": "a/b c"})
    assert path == "/api/v1/users/a%2Fb%20c"


def test_render_path_rejects_unmatched_placeholder():
    with pytest.raises(URLConstructionError):
        render_path("/api/{api-version}/roles/{role-id}", {"api-version": "v1"})


def test_build_url_query_order_token_then_limit_then_filters():
    url = build_url(
        "https://api.sumologic.com",
        "/api/{api-version}/users",
        {"api-version": "v1"},
        query_params={"email": "ada@example.com"},
        page_token="abc",
        page_size=100,
    )
    assert url == "https://api.sumologic.com/api/v1/users?token=abc&limit=100&email=ada%40example.com"


def test_build_url_omits_empty_token():
    url = build_url("https://api.sumologic.com", "/api/{api-version}/roles", {"api-version": "v1"}, page_token="", page_size=100)
    assert url == "https://api.sumologic.com/api/v1/roles?limit=100"


def test_build_url_without_query():
    url = build_url("https://api.sumologic.com/", "/api/{api-version}/serviceAccounts", {"api-version": "v1"})
    assert url == "https://api.sumologic.com/api/v1/serviceAccounts"


def test_build_url_escapes_opaque_token():
    url = build_url("https://api.sumologic.com", "/api/v1/roles", page_token="a+b/c==")
    assert url == "https://api.sumologic.com/api/v1/roles?token=a%2Bb%2Fc%3D%3D"


def test_build_url_keeps_base_path_prefix():
    url = build_url("https://proxy.example.com/sumo", "/api/v1/roles")
    assert url == "https://proxy.example.com/sumo/api/v1/roles"


@pytest.mark.parametrize("base_url", ["", "api.sumologic.com", "ftp://api.sumologic.com", "https://"])
def test_build_url_rejects_malformed_base(base_url):
    with pytest.raises(URLConstructionError):
        build_url(base_url, "/api/v1/roles")
