"""AWS client construction."""
import logging
from typing import Any, Optional

import boto3

from asg_cycler.settings import get_settings

logger = logging.getLogger(__name__)


def create_client(service_name: str, region: Optional[str] = None) -> Any:
    """Create a new AWS service client configured from settings.

    A fresh client is returned on every call; callers own its lifetime.

    Args:
        service_name: boto3 service name, e.g. 'autoscaling'
        region: Region override (defaults to the configured region)

    Returns:
        boto3 client
    """
    settings = get_settings()
    client_kwargs = settings.client_kwargs(region)

    try:
        client = boto3.client(service_name, **client_kwargs)
        logger.debug(f"Created {service_name} client in {client_kwargs['region_name']}")
        return client
    except Exception as e:
        logger.error(f"Error creating {service_name} client: {str(e)}")
        raise


def get_autoscaling_client(region: Optional[str] = None):
    """Get an Auto Scaling client."""
    return create_client('autoscaling', region)


def get_ec2_client(region: Optional[str] = None):
    """Get an EC2 client."""
    return create_client('ec2', region)
