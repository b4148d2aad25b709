"""
Result Rendering

Architectural Intent:
- Turns use case results into the text printed on stdout
- Pure functions returning strings so output is easy to assert on
"""

from typing import Iterable

from ferry.domain.entities.application import Application
from ferry.domain.value_objects.deployment_handle import DeploymentHandle
from ferry.domain.value_objects.version_history import VersionHistory
from ferry.domain.value_objects.wait_result import WaitOutcome, WaitResult


def _value(value) -> str:
    return "-" if value is None else str(value)


def render_application(app: Application) -> str:
    rows = [
        ("ID", app.id),
        ("CPUs", _value(app.cpus)),
        ("Memory", _value(app.mem)),
        ("Instances", _value(app.instances)),
        ("Image", _value(app.image)),
        ("Version", _value(app.version)),
    ]
    if app.deployments:
        rows.append(("Deployments", ", ".join(str(d) for d in app.deployments)))
    width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label:<{width}}  {value}" for label, value in rows)


def render_applications(apps: Iterable[Application]) -> str:
    header = ("ID", "INSTANCES", "CPU", "MEM", "IMAGE")
    rows = [
        (a.id, _value(a.instances), _value(a.cpus), _value(a.mem), _value(a.image))
        for a in apps
    ]
    widths = [max(len(r[i]) for r in [header, *rows]) for i in range(len(header))]
    return "\n".join(
        "  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip()
        for row in [header, *rows]
    )


def render_versions(history: VersionHistory) -> str:
    if history.current is None:
        return f"No versions recorded for {history.app_id}"
    lines = [
        f"Versions of {history.app_id} (most recent first):",
        f"  {history.current} (current)",
    ]
    lines.extend(f"  {version}" for version in history.versions[1:])
    return "\n".join(lines)


def render_handle(handle: DeploymentHandle) -> str:
    return f"Deployment ID: {handle}"


def render_wait(result: WaitResult) -> str:
    if result.outcome is WaitOutcome.COMPLETED:
        return f"[+] Deployment completed in {result.elapsed_seconds:.1f}s"
    pending = ", ".join(str(h) for h in result.pending)
    if result.outcome is WaitOutcome.TIMED_OUT:
        return (
            f"[!] Deployment {pending} did not complete within "
            f"{result.elapsed_seconds:.0f}s; the change remains applied"
        )
    return f"[*] Stopped waiting for {pending}; the deployment continues on the cluster"
