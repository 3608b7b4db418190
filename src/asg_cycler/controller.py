"""
Start/stop state machine for a single autoscaling group.

``stop`` suspends every autoscaling process and then terminates or stops the
group's instances; ``start`` restarts stopped instances and then resumes the
processes. The suspended-process set is the state: an empty set means the
group is running, anything else means it has been stopped. Every call
re-reads that state from the provider.
"""
import logging
from typing import Dict, Any, List, Optional, Union

from asg_cycler.aws.provider import AutoScalingProvider, Boto3AutoScalingProvider
from asg_cycler.models import AutoscalingGroupRef, InstanceRef, InstanceStatus, StopAction
from asg_cycler.task import Task
from asg_cycler.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)


class GroupController:
    """Suspends/resumes one autoscaling group and its instances."""

    def __init__(self, task: Task, name: str, provider: Optional[AutoScalingProvider] = None):
        self.task = task
        self.name = name
        self._provider = provider
        self._ref: Optional[AutoscalingGroupRef] = None

    @property
    def provider(self) -> AutoScalingProvider:
        if self._provider is None:
            logger.debug(f"Creating boto3 provider for {self.task.region}")
            self._provider = Boto3AutoScalingProvider(self.task.region)
        return self._provider

    @property
    def ref(self) -> AutoscalingGroupRef:
        if self._ref is None:
            self._ref = AutoscalingGroupRef(self.name, self.task.region)
        return self._ref

    def start(self) -> None:
        """Restart any stopped instances, and resume autoscaling processes."""
        snapshot = self.provider.snapshot(self.ref)
        if not snapshot.exists:
            self.task.warn(lambda: f"Autoscaling group {self.name} doesn't exist")
            return

        if not snapshot.is_suspended:
            self.task.debug(lambda: f"Scaling group {self.name} already running")
            return

        self.start_instances()
        self.task.unsafe(
            f"Resuming {self.name} processes",
            lambda: self.provider.resume_all_processes(self.ref),
        )

    def stop(self, action: Union[StopAction, str] = StopAction.DEFAULT) -> None:
        """Suspend the autoscaling processes, then terminate or stop the instances.

        Args:
            action: StopAction or its token; anything else raises TaskFailure
                before the provider is touched
        """
        action = StopAction.parse(action)

        snapshot = self.provider.snapshot(self.ref)
        if not snapshot.exists:
            self.task.warn(lambda: f"Autoscaling group {self.name} doesn't exist")
            return

        # Instances are only disposed of on the run that suspends the group
        if snapshot.is_suspended:
            self.task.debug(lambda: f"Scaling group {self.name} already suspended")
            return

        self.task.unsafe(
            f"Stopping {self.name} processes",
            lambda: self.provider.suspend_all_processes(self.ref),
        )
        if action.terminates:
            self.terminate_instances()
        else:
            self.stop_instances()

    def terminate_instances(self) -> None:
        """Terminate all the EC2 instances under the autoscaling group."""
        for instance in self.provider.list_instances(self.ref):
            self.task.unsafe(
                f"Terminating instance {instance.instance_id}",
                lambda i=instance.instance_id: self.provider.terminate_instance(i),
            )

    def stop_instances(self) -> None:
        """Stop all the instances under the autoscaling group.

        Used for groups whose members cannot simply be replaced, where the
        same instances have to come back on start.
        """
        for instance in self.provider.list_instances(self.ref):
            self.task.unsafe(
                f"Stopping instance {instance.instance_id}",
                lambda i=instance.instance_id: self.provider.stop_instance(i),
            )

    def start_instances(self) -> None:
        """Restart any stopped EC2 instances under the autoscaling group."""
        for instance in self.provider.list_instances(self.ref):
            # Terminated while listed under the group
            if not instance.exists_in_provider:
                continue

            if instance.status == InstanceStatus.STOPPED:
                self.task.unsafe(
                    f"Starting instance {instance.instance_id}",
                    lambda i=instance.instance_id: self.provider.start_instance(i),
                )
            else:
                self.task.debug(lambda i=instance.instance_id: f"Instance {i} already running")

    def status(self) -> Dict[str, Any]:
        """Describe the group's current state without changing it."""
        snapshot = self.provider.snapshot(self.ref)
        instances: List[InstanceRef] = []
        if snapshot.exists:
            instances = self.provider.list_instances(self.ref)
        return {
            "group": self.name,
            "region": self.task.region,
            **snapshot.to_dict(),
            "instances": [i.to_dict() for i in instances],
        }


@log_execution_time
def start_group(task: Task, *, group: str, provider: Optional[AutoScalingProvider] = None) -> GroupController:
    """Run ``start`` for one group and return the controller used."""
    controller = GroupController(task, group, provider)
    controller.start()
    return controller


@log_execution_time
def stop_group(task: Task, *, group: str, action: Union[StopAction, str] = StopAction.DEFAULT,
               provider: Optional[AutoScalingProvider] = None) -> GroupController:
    """Run ``stop`` for one group and return the controller used."""
    controller = GroupController(task, group, provider)
    controller.stop(action)
    return controller
