import pytest
from pydantic import ValidationError

from fsmbot.config import BotConfig

from conftest import make_config


def test_defaults():
    config = make_config()

    assert config.owner_id == 0
    assert config.channel_id == 0
    assert config.state_backend == "memory"
    assert config.effective_owner_id == 0


def test_effective_owner_requires_flag_and_id():
    assert make_config(owner_id=5, answer_only_to_owner=True).effective_owner_id == 5
    assert make_config(owner_id=5, answer_only_to_owner=False).effective_owner_id == 0
    assert make_config(owner_id=0, answer_only_to_owner=True).effective_owner_id == 0


def test_reads_prefixed_env(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", "42:env-token")
    monkeypatch.setenv("BOT_OWNER_ID", "")
    monkeypatch.setenv("BOT_CHANNEL_ID", "-100123")
    monkeypatch.setenv("BOT_USE_STATE", "true")
    monkeypatch.setenv("BOT_STATE_TTL_SECONDS", "")

    config = BotConfig(_env_file=None)

    assert config.token == "42:env-token"
    assert config.owner_id == 0
    assert config.channel_id == -100123
    assert config.use_state is True
    assert config.state_ttl_seconds is None


def test_blank_token_is_rejected():
    with pytest.raises(ValidationError):
        make_config(token="   ")


def test_ttl_must_be_positive():
    with pytest.raises(ValidationError):
        make_config(state_ttl_seconds=0)


def test_unknown_backend_is_rejected():
    with pytest.raises(ValidationError):
        make_config(state_backend="mongo")
