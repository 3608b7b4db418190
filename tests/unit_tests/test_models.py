import pytest

from asg_cycler.models import GroupSnapshot, InstanceStatus, StopAction
from asg_cycler.task import TaskFailure


@pytest.mark.parametrize("token, expected", [
    ("default", StopAction.DEFAULT),
    ("terminate", StopAction.TERMINATE),
    ("stop", StopAction.STOP),
    (" Stop ", StopAction.STOP),
    ("TERMINATE", StopAction.TERMINATE),
    (StopAction.STOP, StopAction.STOP),
])
def test_parse_stop_action(token, expected):
    assert StopAction.parse(token) is expected


@pytest.mark.parametrize("token", ["hibernate", "", None, "stop!", 0])
def test_parse_unknown_stop_action_is_task_failure(token):
    with pytest.raises(TaskFailure, match="Unrecognised autoscaling action"):
        StopAction.parse(token)


def test_default_is_terminate():
    assert StopAction.DEFAULT.terminates
    assert StopAction.TERMINATE.terminates
    assert not StopAction.STOP.terminates


@pytest.mark.parametrize("state, status", [
    ("running", InstanceStatus.RUNNING),
    ("stopped", InstanceStatus.STOPPED),
    ("pending", InstanceStatus.OTHER),
    ("stopping", InstanceStatus.OTHER),
])
def test_instance_status_from_ec2_state(state, status):
    assert InstanceStatus.from_ec2_state(state) is status


def test_snapshot_suspension():
    assert not GroupSnapshot(exists=True).is_suspended
    assert GroupSnapshot(exists=True, suspended_processes=frozenset({"Launch"})).is_suspended
    assert GroupSnapshot.missing().exists is False
