import pytest

from anvesh.models import EngineError, EngineErrorType, QueryType, TimeRelevancy
from anvesh.repositories import EngineFactory
from anvesh.services import EngineHandler


def test_factory_lists_builtin_engines():
    assert {"brave", "duckduckgo", "searx"} <= set(EngineFactory.get_supported_engines())


def test_factory_is_case_insensitive():
    engine = EngineFactory.create_engine("DuckDuckGo")
    assert engine.name == "duckduckgo"


def test_factory_rejects_unknown_engine():
    with pytest.raises(EngineError) as exc_info:
        EngineFactory.create_engine("altavista")

    assert exc_info.value.error_type is EngineErrorType.NO_SUCH_ENGINE_FOUND
    assert exc_info.value.engine == "altavista"


def test_handler_fails_on_invalid_engine_name():
    with pytest.raises(EngineError) as exc_info:
        EngineHandler(["duckduckgo", "altavista"])

    assert exc_info.value.error_type is EngineErrorType.NO_SUCH_ENGINE_FOUND


def test_search_queries_all_engines_in_registration_order(register_engine):
    alpha = register_engine("alpha", results=[("A", "https://a.example/", "")])
    beta = register_engine("beta", results=[("B", "https://b.example/", "")])

    with EngineHandler(["beta", "alpha"]) as handler:
        responses = handler.search(
            "rust", page=2, time_relevance=TimeRelevancy.LAST_MONTH, safe_search=1
        )

    assert [r.engine for r in responses] == ["beta", "alpha"]
    assert all(r.ok for r in responses)
    assert alpha.calls == [{
        "query": "rust", "page": 2, "time_relevance": TimeRelevancy.LAST_MONTH, "safe_search": 1
    }]
    assert len(beta.calls) == 1


def test_search_restricts_to_requested_engines(register_engine):
    register_engine("alpha", results=[("A", "https://a.example/", "")])
    beta = register_engine("beta", results=[("B", "https://b.example/", "")])

    handler = EngineHandler(["alpha", "beta"])
    responses = handler.search("rust", engine_names=["ALPHA", "unknown"])

    assert [r.engine for r in responses] == ["alpha"]
    assert beta.calls == []


def test_search_skips_engines_without_query_type(register_engine):
    register_engine("alpha", results=[("A", "https://a.example/", "")])
    images = register_engine("images", results=[("I", "https://i.example/", "")],
                             query_types=QueryType.IMAGE)

    handler = EngineHandler(["alpha", "images"])
    responses = handler.search("cats", query_type=QueryType.TEXT)

    assert [r.engine for r in responses] == ["alpha"]
    assert images.calls == []


def test_engine_errors_do_not_fail_the_search(register_engine):
    register_engine("alpha", results=[("A", "https://a.example/", "")])
    register_engine("broken", error_type=EngineErrorType.REQUEST_ERROR)
    register_engine("crashing", exception=RuntimeError("boom"))

    handler = EngineHandler(["alpha", "broken", "crashing"])
    responses = handler.search("rust")

    by_engine = {r.engine: r for r in responses}
    assert by_engine["alpha"].ok
    assert by_engine["broken"].error.error_type is EngineErrorType.REQUEST_ERROR
    assert by_engine["crashing"].error.error_type is EngineErrorType.UNEXPECTED_ERROR
    assert by_engine["crashing"].error.engine == "crashing"


def test_no_selected_engine_returns_empty(register_engine):
    register_engine("alpha", results=[("A", "https://a.example/", "")])

    handler = EngineHandler(["alpha"])

    assert handler.search("rust", engine_names=[]) == []


def test_user_agent_is_set_on_shared_session(mocker):
    session = mocker.Mock()
    session.headers = {}

    handler = EngineHandler(["duckduckgo"], client=session, user_agent="anvesh-test")
    handler.close()

    assert session.headers["User-Agent"] == "anvesh-test"
    session.close.assert_called_once()
