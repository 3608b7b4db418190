import logging

import pytest

from asg_cycler.task import Task
from tests.consts import TEST_REGION
from tests.fixtures.asg_fixtures import (  # noqa: F401
    aws_credentials,
    autoscaling_client,
    ec2_client,
    mocked_aws,
)


@pytest.fixture
def task():
    log = logging.getLogger("asg_cycler.test")
    log.setLevel(logging.DEBUG)
    return Task(region=TEST_REGION, name="test", log=log)
