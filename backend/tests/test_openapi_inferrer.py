"""
test_openapi_inferrer.py
========================
Tests for the heuristic OpenAPI extractor.
"""

import json

import pytest

from copilot.analyzers.openapi_inferrer import DEFAULT_PATH, infer_openapi
from copilot.core.errors import InputError
from copilot.models.schemas import HttpMethod, OpenAPIFragment
from copilot.services.json_guard import validate


def test_express_get_route():
    fragment = infer_openapi('app.get("/api/users", getUser)')
    assert fragment.method == HttpMethod.GET
    assert fragment.path == "/api/users"
    assert set(fragment.responses) == {"200", "500"}
    assert fragment.responses["200"].description == "Successful response"
    assert fragment.responses["500"].description == "Server error"


def test_post_with_single_quotes():
    fragment = infer_openapi("router.post('/api/orders', async (req, res) => res.json({}))")
    assert fragment.method == HttpMethod.POST
    assert fragment.path == "/api/orders"


def test_verb_match_is_case_insensitive_and_backticks_work():
    fragment = infer_openapi("app.DELETE(`/api/items/:id`, () => null)")
    assert fragment.method == HttpMethod.DELETE
    assert fragment.path == "/api/items/:id"


def test_first_match_wins():
    code = 'app.put("/first", h1); app.patch("/second", h2)'
    fragment = infer_openapi(code)
    assert fragment.method == HttpMethod.PUT
    assert fragment.path == "/first"


def test_defaults_when_nothing_matches():
    fragment = infer_openapi("const handler = () => 42")
    assert fragment.method == HttpMethod.GET
    assert fragment.path == DEFAULT_PATH


def test_empty_code_aborts_with_syntax_error():
    with pytest.raises(InputError, match="Syntax error"):
        infer_openapi("")


@pytest.mark.parametrize("code", [
    'app.get("/api/users", getUser)',
    "router.patch('/api/profile', (req, res) => res.sendStatus(204))",
    "function noRoute() { return 1 }",
])
def test_inferred_fragment_satisfies_openapi_shape(code):
    fragment = infer_openapi(code)
    wire = json.dumps(fragment.model_dump(mode="json", by_alias=True, exclude_none=True))
    assert validate(wire, OpenAPIFragment) == fragment
