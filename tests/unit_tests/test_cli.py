import pytest
from click.testing import CliRunner

from asg_cycler.cli import cli
from asg_cycler.models import InstanceRef, InstanceStatus
from tests.consts import TEST_GROUP_NAME
from tests.fixtures.fake_provider import FakeProvider


@pytest.fixture
def runner(aws_credentials):
    return CliRunner()


def make_provider(**kwargs):
    instances = [
        InstanceRef("i-a", True, InstanceStatus.RUNNING),
        InstanceRef("i-b", True, InstanceStatus.RUNNING),
    ]
    return FakeProvider(instances=instances, **kwargs)


def test_stop_with_action(runner):
    provider = make_provider()
    result = runner.invoke(cli, ["stop", TEST_GROUP_NAME, "--action", "stop"], obj={"provider": provider})

    assert result.exit_code == 0, result.output
    assert provider.verbs() == ["suspend", "stop", "stop"]
    assert "Stopping instance i-a" in result.output


def test_stop_uses_default_action(runner):
    provider = make_provider()
    result = runner.invoke(cli, ["stop", TEST_GROUP_NAME], obj={"provider": provider})

    assert result.exit_code == 0, result.output
    assert provider.verbs() == ["suspend", "terminate", "terminate"]


def test_stop_rejects_unknown_action(runner):
    provider = make_provider()
    result = runner.invoke(cli, ["stop", TEST_GROUP_NAME, "--action", "hibernate"], obj={"provider": provider})

    assert result.exit_code != 0
    assert provider.calls == []


def test_stop_reports_partial_failure(runner):
    provider = make_provider(fail_on=[("terminate", "i-a")])
    result = runner.invoke(cli, ["stop", TEST_GROUP_NAME, "--action", "terminate"], obj={"provider": provider})

    assert result.exit_code == 1
    assert provider.calls[-1] == ("terminate", "i-b")
    assert "Terminating instance i-a: terminate i-a failed" in result.output


def test_start_after_stop(runner):
    provider = make_provider()
    runner.invoke(cli, ["stop", TEST_GROUP_NAME, "--action", "stop"], obj={"provider": provider})
    result = runner.invoke(cli, ["start", TEST_GROUP_NAME], obj={"provider": provider})

    assert result.exit_code == 0, result.output
    assert provider.verbs()[3:] == ["start", "start", "resume"]
    assert f"Resuming {TEST_GROUP_NAME} processes" in result.output


def test_dryrun_flag(runner):
    provider = make_provider()
    result = runner.invoke(cli, ["stop", TEST_GROUP_NAME, "--dryrun"], obj={"provider": provider})

    assert result.exit_code == 0, result.output
    assert provider.calls == []
    assert "- Terminating instance i-a" in result.output


def test_status(runner):
    provider = make_provider(suspended={"Launch"})
    result = runner.invoke(cli, ["status", TEST_GROUP_NAME], obj={"provider": provider})

    assert result.exit_code == 0, result.output
    assert '"suspended_processes": [\n    "Launch"\n  ]' in result.output
    assert '"instance_id": "i-b"' in result.output
    assert provider.calls == []


def test_show_config(runner):
    result = runner.invoke(cli, ["show-config"], obj={})

    assert result.exit_code == 0
    assert "AWS Region: us-east-1" in result.output
    assert "Default Stop Action: default" in result.output
