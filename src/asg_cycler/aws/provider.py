"""
Autoscaling provider port and its boto3 implementation.

The controller only talks to an AutoScalingProvider. Reads describe the
current state of a group and its instances; mutating calls let botocore
errors propagate so the caller's best-effort boundary can record them.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from asg_cycler.aws.utils import get_autoscaling_client, get_ec2_client
from asg_cycler.models import AutoscalingGroupRef, GroupSnapshot, InstanceRef, InstanceStatus

logger = logging.getLogger(__name__)

# EC2 states in which an instance no longer counts as present
GONE_STATES = ("shutting-down", "terminated")

# EC2 rejects more values than this in one filter (FilterLimitExceeded)
MAX_FILTER_VALUES = 200


class AutoScalingProvider(ABC):
    """Capabilities the controller needs from the cloud provider"""

    @abstractmethod
    def group_exists(self, ref: AutoscalingGroupRef) -> bool:
        pass

    @abstractmethod
    def suspended_processes(self, ref: AutoscalingGroupRef) -> FrozenSet[str]:
        pass

    @abstractmethod
    def list_instances(self, ref: AutoscalingGroupRef) -> List[InstanceRef]:
        """List the group's member instances with their provider-side state."""
        pass

    @abstractmethod
    def suspend_all_processes(self, ref: AutoscalingGroupRef) -> None:
        pass

    @abstractmethod
    def resume_all_processes(self, ref: AutoscalingGroupRef) -> None:
        pass

    @abstractmethod
    def start_instance(self, instance_id: str) -> None:
        pass

    @abstractmethod
    def stop_instance(self, instance_id: str) -> None:
        pass

    @abstractmethod
    def terminate_instance(self, instance_id: str) -> None:
        pass

    def snapshot(self, ref: AutoscalingGroupRef) -> GroupSnapshot:
        """Build a GroupSnapshot from the individual read operations."""
        if not self.group_exists(ref):
            return GroupSnapshot.missing()
        return GroupSnapshot(
            exists=True,
            suspended_processes=frozenset(self.suspended_processes(ref)),
            instance_ids=tuple(i.instance_id for i in self.list_instances(ref)),
        )


class Boto3AutoScalingProvider(AutoScalingProvider):
    """AutoScalingProvider backed by the EC2 Auto Scaling and EC2 APIs."""

    def __init__(self, region: str, autoscaling_client: Any = None, ec2_client: Any = None):
        self.region = region
        self.autoscaling = autoscaling_client or get_autoscaling_client(region)
        self.ec2 = ec2_client or get_ec2_client(region)

    def _describe_group(self, ref: AutoscalingGroupRef) -> Optional[Dict[str, Any]]:
        response = self.autoscaling.describe_auto_scaling_groups(
            AutoScalingGroupNames=[ref.name]
        )
        groups = response.get('AutoScalingGroups', [])
        if not groups:
            logger.debug(f"No autoscaling group named {ref.name} in {self.region}")
            return None
        return groups[0]

    @staticmethod
    def _suspended(group: Dict[str, Any]) -> FrozenSet[str]:
        return frozenset(p['ProcessName'] for p in group.get('SuspendedProcesses', []))

    @staticmethod
    def _member_ids(group: Dict[str, Any]) -> List[str]:
        return [i['InstanceId'] for i in group.get('Instances', [])]

    def _instance_states(self, instance_ids: Iterable[str]) -> Dict[str, str]:
        """Map instance id to EC2 state name for the ids EC2 knows about."""
        instance_ids = list(instance_ids)
        if not instance_ids:
            return {}

        # A filter, unlike InstanceIds, does not fail on unknown ids
        states = {}
        paginator = self.ec2.get_paginator('describe_instances')
        for start in range(0, len(instance_ids), MAX_FILTER_VALUES):
            chunk = instance_ids[start:start + MAX_FILTER_VALUES]
            for page in paginator.paginate(
                Filters=[{'Name': 'instance-id', 'Values': chunk}]
            ):
                for reservation in page.get('Reservations', []):
                    for instance in reservation.get('Instances', []):
                        states[instance['InstanceId']] = instance['State']['Name']
        return states

    def group_exists(self, ref: AutoscalingGroupRef) -> bool:
        return self._describe_group(ref) is not None

    def suspended_processes(self, ref: AutoscalingGroupRef) -> FrozenSet[str]:
        group = self._describe_group(ref)
        return self._suspended(group) if group else frozenset()

    def list_instances(self, ref: AutoscalingGroupRef) -> List[InstanceRef]:
        group = self._describe_group(ref)
        if group is None:
            return []

        member_ids = self._member_ids(group)
        states = self._instance_states(member_ids)

        instances = []
        for instance_id in member_ids:
            state = states.get(instance_id)
            exists = state is not None and state not in GONE_STATES
            status = InstanceStatus.from_ec2_state(state) if exists else InstanceStatus.OTHER
            instances.append(InstanceRef(instance_id, exists, status))
        return instances

    def snapshot(self, ref: AutoscalingGroupRef) -> GroupSnapshot:
        group = self._describe_group(ref)
        if group is None:
            return GroupSnapshot.missing()
        return GroupSnapshot(
            exists=True,
            suspended_processes=self._suspended(group),
            instance_ids=tuple(self._member_ids(group)),
        )

    def suspend_all_processes(self, ref: AutoscalingGroupRef) -> None:
        self.autoscaling.suspend_processes(AutoScalingGroupName=ref.name)

    def resume_all_processes(self, ref: AutoscalingGroupRef) -> None:
        self.autoscaling.resume_processes(AutoScalingGroupName=ref.name)

    def start_instance(self, instance_id: str) -> None:
        self.ec2.start_instances(InstanceIds=[instance_id])

    def stop_instance(self, instance_id: str) -> None:
        self.ec2.stop_instances(InstanceIds=[instance_id])

    def terminate_instance(self, instance_id: str) -> None:
        self.ec2.terminate_instances(InstanceIds=[instance_id])
