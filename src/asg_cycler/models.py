"""Data model for autoscaling group lifecycle operations."""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple, Union

from asg_cycler.task import TaskFailure


class InstanceStatus(str, Enum):
    """Coarse EC2 instance status as seen by the controller"""
    RUNNING = "running"
    STOPPED = "stopped"
    OTHER = "other"

    @classmethod
    def from_ec2_state(cls, state_name: str) -> "InstanceStatus":
        if state_name == "running":
            return cls.RUNNING
        if state_name == "stopped":
            return cls.STOPPED
        return cls.OTHER


class StopAction(str, Enum):
    """How instances are disposed of when a group is stopped"""
    DEFAULT = "default"      # Same as TERMINATE
    TERMINATE = "terminate"  # Instance destroyed
    STOP = "stop"            # Powered off, instance retained

    @property
    def terminates(self) -> bool:
        return self in (StopAction.DEFAULT, StopAction.TERMINATE)

    @classmethod
    def parse(cls, value: Union["StopAction", str, None]) -> "StopAction":
        """Parse a stop action token.

        Args:
            value: A StopAction or one of "default", "terminate", "stop"

        Returns:
            The matching StopAction

        Raises:
            TaskFailure: If the value is not a recognised action
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip().lower()
            for action in cls:
                if action.value == token:
                    return action
        raise TaskFailure(f"Unrecognised autoscaling action {value}")


@dataclass(frozen=True)
class AutoscalingGroupRef:
    """Identifies an autoscaling group within a region"""
    name: str
    region: str


@dataclass(frozen=True)
class InstanceRef:
    """One instance listed under a group"""
    instance_id: str
    exists_in_provider: bool
    status: InstanceStatus = InstanceStatus.OTHER

    def to_dict(self):
        return {
            "instance_id": self.instance_id,
            "exists_in_provider": self.exists_in_provider,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class GroupSnapshot:
    """Read-only view of a group at a point in time"""
    exists: bool
    suspended_processes: FrozenSet[str] = field(default_factory=frozenset)
    instance_ids: Tuple[str, ...] = ()

    @classmethod
    def missing(cls) -> "GroupSnapshot":
        return cls(exists=False)

    @property
    def is_suspended(self) -> bool:
        return bool(self.suspended_processes)

    def to_dict(self):
        return {
            "exists": self.exists,
            "suspended_processes": sorted(self.suspended_processes),
            "instance_ids": list(self.instance_ids),
        }
