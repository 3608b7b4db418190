import pytest
from pydantic import ValidationError

from asg_cycler.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # No stray .env file or ambient AWS config
    monkeypatch.chdir(tmp_path)
    for name in ("AWS_DEFAULT_REGION", "AWS_ENDPOINT_URL", "AWS_ACCESS_KEY_ID",
                 "AWS_SECRET_ACCESS_KEY", "ASG_CYCLER_DRYRUN",
                 "ASG_CYCLER_DEFAULT_STOP_ACTION", "ASG_CYCLER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = Settings()

    assert settings.aws_region == "us-east-1"
    assert settings.default_stop_action == "default"
    assert settings.dryrun is False
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("ASG_CYCLER_DEFAULT_STOP_ACTION", "Stop")
    monkeypatch.setenv("ASG_CYCLER_DRYRUN", "true")
    monkeypatch.setenv("ASG_CYCLER_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.aws_region == "eu-west-1"
    assert settings.default_stop_action == "stop"
    assert settings.dryrun is True
    assert settings.log_level == "DEBUG"


def test_unknown_default_stop_action_rejected(monkeypatch):
    monkeypatch.setenv("ASG_CYCLER_DEFAULT_STOP_ACTION", "hibernate")

    with pytest.raises(ValidationError):
        Settings()


def test_client_kwargs(monkeypatch):
    monkeypatch.setenv("AWS_ENDPOINT_URL", "http://localhost:5000")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "mock")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "mock")

    kwargs = Settings().client_kwargs("ap-southeast-1")

    assert kwargs == {
        "region_name": "ap-southeast-1",
        "aws_access_key_id": "mock",
        "aws_secret_access_key": "mock",
        "endpoint_url": "http://localhost:5000",
    }
