from tokenlist.config import Settings


def test_defaults_point_at_public_services(monkeypatch):
    monkeypatch.delenv("ETHPLORER_API_KEY", raising=False)
    monkeypatch.delenv("MAX_CONCURRENT_REQUESTS", raising=False)

    settings = Settings(_env_file=None)

    assert settings.ethplorer_api_key == "freekey"
    assert settings.token_list_base_url.endswith("/tokens/eth")
    assert settings.max_concurrent_requests == 10


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("max_concurrent_requests", "3")

    settings = Settings(_env_file=None)

    assert settings.rpc_url == "http://localhost:8545"
    assert settings.max_concurrent_requests == 3


def test_registry_toggle(monkeypatch):
    monkeypatch.setenv("ENABLE_REGISTRY", "false")

    settings = Settings(_env_file=None)

    assert settings.has_registry is False
