"""Tests for settings and app wiring."""

from __future__ import annotations

import pytest

from docscope.app import DocsApp
from docscope.configs import (
    ApiService,
    DocscopeSettings,
    HashEmbeddingConfig,
    LLMAnswerConfig,
    OpenAIEmbeddingConfig,
)
from docscope.embeddings import HashEmbeddings, OpenAIEmbeddings
from docscope.generation import SYS_PROMPT, LLMAnswerGenerator


ENV_VARS = [
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "ORG_NAME",
    "SWAGGERHUB_URL",
    "SWAGGERHUB_API_KEY",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"DOCSCOPE_{name}", raising=False)
    monkeypatch.delenv("DOCSCOPE_ANSWER_MODEL", raising=False)
    monkeypatch.delenv("DOCSCOPE_EMBEDDING", raising=False)


def test_defaults():
    settings = DocscopeSettings(_env_file=None)
    assert settings.org_name == "alldigitalrewards"
    assert settings.github_token is None
    assert settings.readme_chars == 2000  # noqa: PLR2004
    assert settings.max_readmes == 20  # noqa: PLR2004
    assert isinstance(settings.get_embedding_config(), HashEmbeddingConfig)
    assert isinstance(settings.create_embedding_model(), HashEmbeddings)


def test_default_registry_uses_swagger_url():
    settings = DocscopeSettings(_env_file=None, swaggerhub_url="https://x.example/spec")
    [(service_id, service)] = settings.api_services().items()
    assert service_id == "marketplace-api"
    assert service.swagger_url == "https://x.example/spec"
    assert "webhook" in service.topics


def test_unprefixed_and_prefixed_env_vars(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp-secret")
    monkeypatch.setenv("DOCSCOPE_ORG_NAME", "acme")
    monkeypatch.setenv("DOCSCOPE_MAX_READMES", "3")
    settings = DocscopeSettings(_env_file=None)
    assert settings.github_token.get_secret_value() == "ghp-secret"
    assert settings.org_name == "acme"
    assert settings.max_readmes == 3  # noqa: PLR2004
    assert "ghp-secret" not in repr(settings)


def test_openai_key_selects_remote_embeddings(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    settings = DocscopeSettings(_env_file=None)
    config = settings.get_embedding_config()
    assert isinstance(config, OpenAIEmbeddingConfig)
    assert config.api_key.get_secret_value() == "sk-env"
    model = settings.create_embedding_model()
    assert isinstance(model, OpenAIEmbeddings)
    assert model.fallback.dimensions == model.dimensions


def test_explicit_embedding_config_wins(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    embedding = {"type": "hash", "dimensions": 64}
    settings = DocscopeSettings(_env_file=None, embedding=embedding)
    model = settings.create_embedding_model()
    assert isinstance(model, HashEmbeddings)
    assert model.dimensions == 64  # noqa: PLR2004


def test_services_from_env(monkeypatch):
    monkeypatch.setenv(
        "DOCSCOPE_SERVICES",
        '{"ledger": {"name": "Ledger", "swagger_url": "https://x.example/ledger.yaml"}}',
    )
    settings = DocscopeSettings(_env_file=None)
    assert settings.api_services() == {
        "ledger": ApiService(name="Ledger", swagger_url="https://x.example/ledger.yaml")
    }


def test_app_wiring(settings, github, spec_loader):
    app = DocsApp.from_settings(settings, github=github, spec_loader=spec_loader)
    assert app.retriever.generator is None
    assert app.indexer.readme_chars == 500  # noqa: PLR2004
    assert set(app.services) == {"marketplace-api"}
    assert app.retriever.context is app.context is app.indexer.context


def test_app_builds_clients_from_settings():
    settings = DocscopeSettings(
        _env_file=None,
        github_token="ghp-secret",
        org_name="acme",
        swaggerhub_api_key="hub-key",
    )
    app = DocsApp.from_settings(settings)
    assert app.github.org == "acme"
    assert app.github.headers["Authorization"] == "Bearer ghp-secret"
    assert app.spec_loader.swaggerhub_api_key == "hub-key"


def test_answer_model_enables_generator(settings, github, spec_loader, monkeypatch):
    installed = classmethod(lambda cls: [])
    monkeypatch.setattr(LLMAnswerGenerator, "missing_packages", installed)
    configured = settings.model_copy(update={"answer_model": "openai:gpt-4o-mini"})
    app = DocsApp.from_settings(configured, github=github, spec_loader=spec_loader)
    assert isinstance(app.retriever.generator, LLMAnswerGenerator)
    assert app.retriever.generator.model == "openai:gpt-4o-mini"


def test_answer_model_without_agent_package(settings, github, spec_loader, monkeypatch):
    missing = classmethod(lambda cls: ["llmling-agent"])
    monkeypatch.setattr(LLMAnswerGenerator, "missing_packages", missing)
    configured = settings.model_copy(update={"answer_model": "openai:gpt-4o-mini"})
    app = DocsApp.from_settings(configured, github=github, spec_loader=spec_loader)
    assert app.retriever.generator is None
    assert not LLMAnswerGenerator.has_required_packages()


def test_answer_config():
    settings = DocscopeSettings(_env_file=None)
    assert settings.get_answer_config() is None
    configured = settings.model_copy(update={"answer_model": "openai:gpt-4o"})
    assert configured.get_answer_config() == LLMAnswerConfig(model="openai:gpt-4o")


def test_answer_generator_config_round_trip():
    generator = LLMAnswerConfig(model="openai:gpt-4o").get_provider()
    assert generator.system_prompt == SYS_PROMPT
    assert generator.to_config() == LLMAnswerConfig(model="openai:gpt-4o")

    custom = LLMAnswerGenerator("openai:gpt-4o", system_prompt="Be brief.")
    restored = LLMAnswerGenerator.from_config(custom.to_config())
    assert restored.model == "openai:gpt-4o"
    assert restored.system_prompt == "Be brief."


def test_missing_packages_reports_unimportable_distributions():
    class Needy(LLMAnswerGenerator):
        REQUIRED_PACKAGES = {"pydantic", "docscope-surely-not-installed"}

    assert Needy.missing_packages() == ["docscope-surely-not-installed"]
    assert not Needy.has_required_packages()
    assert HashEmbeddings.missing_packages() == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
