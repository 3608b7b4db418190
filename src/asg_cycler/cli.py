# cli.py
import json
import logging

import click

from asg_cycler.controller import GroupController, start_group, stop_group
from asg_cycler.models import StopAction
from asg_cycler.settings import get_settings
from asg_cycler.task import Task, TaskFailure

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # botocore is noisy at DEBUG
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def _make_task(group: str, region, dryrun: bool) -> Task:
    settings = get_settings()
    return Task(
        region=region or settings.aws_region,
        name=group,
        dryrun=dryrun or settings.dryrun,
    )


def _report(ctx, task: Task) -> None:
    """Print per-action results and exit non-zero if any failed."""
    for result in task.results:
        if result.skipped:
            mark = "-"
        elif result.ok:
            mark = "✅"
        else:
            mark = "❌"
        line = f"{mark} {result.description}"
        if result.error:
            line += f": {result.error}"
        click.echo(line)

    try:
        task.raise_on_failures()
    except TaskFailure as e:
        click.echo(f"❌ {e}", err=True)
        ctx.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose):
    """Suspend and resume EC2 autoscaling groups"""
    ctx.ensure_object(dict)
    configure_logging("DEBUG" if verbose else get_settings().log_level)


@cli.command()
@click.argument("group")
@click.option("--region", default=None, help="AWS region (defaults to settings)")
@click.option("--dryrun", is_flag=True, help="Log actions without executing them")
@click.pass_context
def start(ctx, group, region, dryrun):
    """Restart stopped instances and resume GROUP's autoscaling processes"""
    task = _make_task(group, region, dryrun)
    start_group(task, group=group, provider=ctx.obj.get("provider"))
    _report(ctx, task)


@cli.command()
@click.argument("group")
@click.option("--action",
              type=click.Choice([a.value for a in StopAction]),
              default=None,
              help="How to dispose of instances (defaults to settings)")
@click.option("--region", default=None, help="AWS region (defaults to settings)")
@click.option("--dryrun", is_flag=True, help="Log actions without executing them")
@click.pass_context
def stop(ctx, group, action, region, dryrun):
    """Suspend GROUP's autoscaling processes and dispose of its instances"""
    task = _make_task(group, region, dryrun)
    try:
        stop_group(task, group=group, action=action or get_settings().default_stop_action,
                   provider=ctx.obj.get("provider"))
    except TaskFailure as e:
        click.echo(f"❌ {e}", err=True)
        ctx.exit(1)
    _report(ctx, task)


@cli.command()
@click.argument("group")
@click.option("--region", default=None, help="AWS region (defaults to settings)")
@click.pass_context
def status(ctx, group, region):
    """Show GROUP's suspended processes and instances"""
    task = _make_task(group, region, dryrun=False)
    controller = GroupController(task, group, ctx.obj.get("provider"))
    click.echo(json.dumps(controller.status(), indent=2))


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  Default Stop Action: {settings.default_stop_action}")
    click.echo(f"  Dry Run: {settings.dryrun}")
    click.echo(f"  Log Level: {settings.log_level}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
