"""Command group: describe one project, typekit, type, task, or deployment."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from specreg.commands._base import SpecGroup
from specreg.services.inspect import InspectService

if TYPE_CHECKING:
    from specreg.commands._context import AppContext


@click.group(cls=SpecGroup)
@click.pass_obj
def show(app: AppContext) -> None:
    """Load a model by name and describe it."""


@show.command(
    examples="""\
  specreg show project demo
  specreg --json show project demo"""
)
@click.argument("name")
@click.pass_obj
def project(app: AppContext, name: str) -> None:
    """Show what a project uses, defines, and deploys."""
    app.emit(InspectService(app.workspace).project(name))


@show.command(
    examples="""\
  specreg show typekit base"""
)
@click.argument("name")
@click.pass_obj
def typekit(app: AppContext, name: str) -> None:
    """List the types a typekit declares and which ones it exports."""
    app.emit(InspectService(app.workspace).typekit(name))


@show.command(
    "type",
    examples="""\
  specreg show type -t base /base/Time
  specreg show type -t base --interface /base/Time
  specreg --dummy-types show type /unknown/Thing""",
)
@click.argument("name")
@click.option(
    "-t",
    "--typekit",
    "typekits",
    multiple=True,
    help="Typekit to load before resolving (repeatable).",
)
@click.option(
    "--interface",
    is_flag=True,
    help="Fail unless the type can be used on a task interface.",
)
@click.pass_obj
def type_(app: AppContext, name: str, typekits: tuple[str, ...], interface: bool) -> None:
    """Show a type definition and the typekits declaring it."""
    svc = InspectService(app.workspace)
    app.emit(svc.type(name, interface=interface, typekits=typekits))


@show.command(
    examples="""\
  specreg show task demo::Controller"""
)
@click.argument("name")
@click.pass_obj
def task(app: AppContext, name: str) -> None:
    """Show a task model and its ports, loading its library if needed."""
    app.emit(InspectService(app.workspace).task(name))


@show.command(
    examples="""\
  specreg show deployment demo_deployment"""
)
@click.argument("name")
@click.pass_obj
def deployment(app: AppContext, name: str) -> None:
    """Show the tasks a deployment instantiates."""
    app.emit(InspectService(app.workspace).deployment(name))


@show.command(
    "deployed-task",
    examples="""\
  specreg show deployed-task ctrl
  specreg show deployed-task ctrl --deployment demo_deployment""",
)
@click.argument("name")
@click.option(
    "--deployment",
    "deployment_name",
    default=None,
    help="Deployment to look in; required when the name is ambiguous.",
)
@click.pass_obj
def deployed_task(app: AppContext, name: str, deployment_name: str | None) -> None:
    """Show a deployed task and the ports of its task model."""
    app.emit(InspectService(app.workspace).deployed_task(name, deployment_name))
