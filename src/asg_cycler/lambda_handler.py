"""
Lambda entry point for scheduled start/stop runs.

Expected event:
    {"group": "web-asg", "operation": "stop", "action": "terminate",
     "region": "eu-west-1", "dryrun": false}

``action``, ``region`` and ``dryrun`` are optional and fall back to settings.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from asg_cycler.aws.provider import AutoScalingProvider
from asg_cycler.controller import start_group, stop_group
from asg_cycler.settings import get_settings
from asg_cycler.task import Task, TaskFailure

logger = logging.getLogger(__name__)
logger.setLevel(get_settings().log_level)

OPERATIONS = ("start", "stop")


def parse_dryrun(value: Any, default: bool) -> bool:
    """Read the event's dryrun flag: a bool or "true"/"false" in any case."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise TaskFailure(f"Unrecognised dryrun value {value!r}, expected true or false")


def handle(event: Dict[str, Any], provider: Optional[AutoScalingProvider] = None) -> Dict[str, Any]:
    """Run one operation described by ``event`` and summarise the outcome.

    Raises:
        TaskFailure: If the event names no group, an unknown operation, an
            unknown stop action or a dryrun flag that is not a boolean
    """
    settings = get_settings()

    group = event.get('group')
    if not group:
        raise TaskFailure("Event is missing 'group'")

    operation = event.get('operation')
    if operation not in OPERATIONS:
        raise TaskFailure(f"Unrecognised operation {operation}, expected one of {OPERATIONS}")

    task = Task(
        region=event.get('region') or settings.aws_region,
        name=group,
        dryrun=parse_dryrun(event.get('dryrun'), settings.dryrun),
    )

    if operation == 'start':
        start_group(task, group=group, provider=provider)
    else:
        action = event.get('action') or settings.default_stop_action
        stop_group(task, group=group, action=action, provider=provider)

    return {
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'group': group,
        'region': task.region,
        'operation': operation,
        'results': [r.to_dict() for r in task.results],
        'failures': len(task.failures),
    }


def lambda_handler(event, context):
    logger.info(f"=== asg-cycler invoked at {datetime.now(timezone.utc)} with {json.dumps(event)} ===")

    response = handle(event)

    if response['failures']:
        logger.error(f"❌ {response['failures']} action(s) failed for {response['group']}")
        return {'statusCode': 500, 'body': json.dumps(response)}

    logger.info(f"✅ Complete: {response['operation']} {response['group']}")
    return {'statusCode': 200, 'body': json.dumps(response)}
