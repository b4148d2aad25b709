"""
Command Table

Architectural Intent:
- Explicit table mapping each 'app' subcommand to its handler and flag schema
- Built once at process start and handed to the parser builder
- Handlers translate parsed arguments into use case requests and print results
"""

from __future__ import annotations
import argparse
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from ferry.application.dtos.deployment_dtos import (
    CreateApplicationRequest,
    ResourceField,
    RollbackRequest,
    UpdateResourceRequest,
)
from ferry.domain.value_objects.submission_options import SubmissionOptions
from ferry.presentation.cli.arguments import duration_arg, param_arg
from ferry.presentation.cli.rendering import (
    render_application,
    render_applications,
    render_handle,
    render_versions,
    render_wait,
)

Handler = Callable[[Any, argparse.Namespace], Awaitable[None]]


@dataclass(frozen=True)
class Flag:
    names: tuple[str, ...]
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CommandSpec:
    name: str
    help: str
    handler: Handler
    flags: tuple[Flag, ...] = ()


WAIT_FLAGS = (
    Flag(("--wait", "-w"), {"action": "store_true", "help": "Wait for the deployment to complete"}),
    Flag(
        ("--timeout", "-t"),
        {
            "type": duration_arg,
            "default": None,
            "help": "Max duration to wait (eg. 90s | 2m); defaults to the configured bound",
        },
    ),
)

CREATE_FLAGS = (
    Flag(("descriptor",), {"help": "Application descriptor file (.json | .yaml)"}),
    Flag(
        ("--tempctx",),
        {"default": None, "help": "Template context file; defaults to template-context.json"},
    ),
    Flag(
        ("--force", "-f"),
        {"action": "store_true", "help": "Update the application if it already exists"},
    ),
    Flag(
        ("--stop-deploys",),
        {
            "action": "store_true",
            "help": "Cancel an in-flight deployment of this app before a forced update",
        },
    ),
    Flag(
        ("--ignore-missing", "-i"),
        {
            "action": "store_true",
            "help": "Leave unresolved ${PARAMS} in place instead of failing",
        },
    ),
    Flag(
        ("--env-file", "-c"),
        {"default": None, "help": "File of KEY=VALUE parameters used for substitution"},
    ),
    Flag(
        ("--param", "-p"),
        {
            "action": "append",
            "type": param_arg,
            "default": [],
            "dest": "params",
            "help": "Parameter used for substitution, eg. -p MYVAR=value (repeatable)",
        },
    ),
    Flag(("--dry-run",), {"action": "store_true", "help": "Preview the resolved descriptor only"}),
) + WAIT_FLAGS

APP_ID = Flag(("app_id",), {"help": "Application id"})


def _print_wait(result) -> None:
    if result is not None:
        print(render_wait(result))


async def create_app(container, args: argparse.Namespace) -> None:
    options = SubmissionOptions(
        wait=args.wait,
        force=args.force,
        error_on_missing_params=not args.ignore_missing,
        stop_existing_deploy=args.stop_deploys,
        dry_run=args.dry_run,
        timeout=args.timeout,
    )
    request = CreateApplicationRequest(
        descriptor_path=args.descriptor,
        options=options,
        params_file=args.env_file,
        params=tuple(args.params),
        template_context_path=args.tempctx or container.config.template.context_path,
    )
    response = await container.deploy_application.execute(request)

    if response.unresolved_params:
        print(
            "[!] Unresolved parameters left in place: "
            + ", ".join(response.unresolved_params)
        )
    if response.dry_run:
        print(response.descriptor_text)
        return
    print(render_application(response.application))
    _print_wait(response.wait)


async def list_apps(container, args: argparse.Namespace) -> None:
    apps = await container.queries.list(args.filter)
    print(render_applications(apps))


async def get_app(container, args: argparse.Namespace) -> None:
    print(render_application(await container.queries.get(args.app_id)))


async def app_versions(container, args: argparse.Namespace) -> None:
    print(render_versions(await container.queries.versions(args.app_id)))


def _update_resource(resource: ResourceField) -> Handler:
    async def handler(container, args: argparse.Namespace) -> None:
        request = UpdateResourceRequest(
            app_id=args.app_id,
            field=resource,
            value=args.value,
            wait=args.wait,
            timeout=args.timeout,
        )
        response = await container.update_resource.execute(request)
        print(render_application(response.application))
        _print_wait(response.wait)

    return handler


async def rollback_app(container, args: argparse.Namespace) -> None:
    request = RollbackRequest(
        app_id=args.app_id, version=args.version, wait=args.wait, timeout=args.timeout
    )
    response = await container.rollback.execute(request)
    print(render_application(response.application))
    _print_wait(response.wait)


async def scale_app(container, args: argparse.Namespace) -> None:
    response = await container.scale.execute(
        args.app_id, args.instances, wait=args.wait, timeout=args.timeout
    )
    print(render_handle(response.handle))
    _print_wait(response.wait)


async def restart_app(container, args: argparse.Namespace) -> None:
    response = await container.restart.execute(
        args.app_id, force=args.force, wait=args.wait, timeout=args.timeout
    )
    print(render_handle(response.handle))
    _print_wait(response.wait)


async def destroy_app(container, args: argparse.Namespace) -> None:
    response = await container.destroy.execute(
        args.app_id, wait=args.wait, timeout=args.timeout
    )
    print(render_handle(response.handle))
    _print_wait(response.wait)


def build_command_table() -> dict[str, CommandSpec]:
    specs = [
        CommandSpec("create", "Create an application from a descriptor file", create_app, CREATE_FLAGS),
        CommandSpec(
            "list",
            "List applications (optional filter: label=web | id=/services | cmd=java)",
            list_apps,
            (Flag(("filter",), {"nargs": "?", "default": None, "help": "key=value filter"}),),
        ),
        CommandSpec("get", "Show an application by id", get_app, (APP_ID,)),
        CommandSpec("versions", "List the deployed versions of an application", app_versions, (APP_ID,)),
        CommandSpec(
            "update cpu",
            "Set the CPU shares of an application",
            _update_resource(ResourceField.CPU),
            (APP_ID, Flag(("value",), {"help": "CPU shares, eg. 0.5"})) + WAIT_FLAGS,
        ),
        CommandSpec(
            "update mem",
            "Set the memory (MB) of an application",
            _update_resource(ResourceField.MEMORY),
            (APP_ID, Flag(("value",), {"help": "Memory in MB"})) + WAIT_FLAGS,
        ),
        CommandSpec(
            "update instances",
            "Set the instance count of an application",
            _update_resource(ResourceField.INSTANCES),
            (APP_ID, Flag(("value",), {"help": "Instance count"})) + WAIT_FLAGS,
        ),
        CommandSpec(
            "rollback",
            "Roll an application back to a version (default: the previous one)",
            rollback_app,
            (APP_ID, Flag(("version",), {"nargs": "?", "default": None, "help": "Target version"}))
            + WAIT_FLAGS,
        ),
        CommandSpec(
            "scale",
            "Scale an application to a total number of instances",
            scale_app,
            (APP_ID, Flag(("instances",), {"help": "Total instances"})) + WAIT_FLAGS,
        ),
        CommandSpec(
            "restart",
            "Restart an application",
            restart_app,
            (APP_ID, Flag(("--force", "-f"), {"action": "store_true", "help": "Restart even if a deployment is running"}))
            + WAIT_FLAGS,
        ),
        CommandSpec(
            "destroy",
            "Remove an application and all of its instances",
            destroy_app,
            (APP_ID,) + WAIT_FLAGS,
        ),
    ]
    return {spec.name: spec for spec in specs}


def add_commands(
    subparsers: argparse._SubParsersAction, table: dict[str, CommandSpec]
) -> None:
    """Register every command in ``table``; 'update cpu' nests under 'update'."""
    groups: dict[str, argparse._SubParsersAction] = {}
    for name, spec in table.items():
        target = subparsers
        parts = name.split()
        if len(parts) == 2:
            group, name = parts
            if group not in groups:
                group_parser = subparsers.add_parser(
                    group, help=f"{group.capitalize()} a running application"
                )
                group_parser.set_defaults(help_parser=group_parser)
                groups[group] = group_parser.add_subparsers(
                    dest=f"{group}_command", metavar="FIELD"
                )
            target = groups[group]

        parser = target.add_parser(name, help=spec.help, description=spec.help)
        for flag in spec.flags:
            parser.add_argument(*flag.names, **flag.options)
        parser.set_defaults(handler=spec.handler, command_name=spec.name)


def lookup(table: dict[str, CommandSpec], name: Optional[str]) -> Optional[CommandSpec]:
    return table.get(name) if name else None
