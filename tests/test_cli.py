import json

import pytest

import search_cli
from anvesh import config
from anvesh.models import EngineError, EngineErrorType
from anvesh.services import EngineHandler, SearchService


@pytest.fixture
def fake_service(register_engine, monkeypatch):
    alpha = register_engine("alpha", results=[("Rust", "https://www.rust-lang.org/", "Rust language")])
    monkeypatch.setattr(
        search_cli, "initialize_search_service",
        lambda: SearchService(EngineHandler(["alpha"]), safe_search=0)
    )
    return alpha


def test_list_instances_as_json(instances_file, monkeypatch, capsys):
    monkeypatch.setattr(config.InstanceConfig, "INSTANCES_FILE", str(instances_file))

    assert search_cli.main(["--instances", "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert [i["network"] for i in data] == ["www", "www", "tor"]


def test_query_required():
    with pytest.raises(SystemExit) as exc_info:
        search_cli.main([])

    assert exc_info.value.code == 2


def test_unknown_engine_rejected():
    with pytest.raises(SystemExit):
        search_cli.main(["--engine", "altavista", "rust"])


def test_search_json(fake_service, capsys):
    assert search_cli.main(["--json", "--page", "2", "--time", "year", "rust", "lang"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["total_results"] == 1
    assert data["results"][0]["engines"] == ["alpha"]
    assert fake_service.calls[0]["query"] == "rust lang"
    assert fake_service.calls[0]["page"] == 2


def test_search_list_output(fake_service, capsys):
    assert search_cli.main(["--engine", "alpha", "-s", "1", "rust"]) == 0

    out = capsys.readouterr().out
    assert "https://www.rust-lang.org/" in out
    assert "Total results: 1" in out
    assert fake_service.calls[0]["safe_search"] == 1


def test_engine_initialization_failure(monkeypatch, capsys):
    def fail():
        raise EngineError(EngineErrorType.NO_SUCH_ENGINE_FOUND, "altavista")

    monkeypatch.setattr(search_cli, "initialize_search_service", fail)

    assert search_cli.main(["rust"]) == 1
    assert "Error initializing engines" in capsys.readouterr().out


def test_interrupted_search_exits_130(register_engine, monkeypatch, capsys):
    register_engine("stuck", exception=KeyboardInterrupt())
    monkeypatch.setattr(
        search_cli, "initialize_search_service",
        lambda: SearchService(EngineHandler(["stuck"]), safe_search=0)
    )

    assert search_cli.main(["rust"]) == 130
    assert "Search cancelled by user." in capsys.readouterr().out
