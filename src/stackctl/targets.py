"""
Target table: every stackctl target is a function (ctx) -> exit code, registered
with its section and one-line help. Alias targets re-enter another target with
MODE/SERVICE overridden.
"""

from __future__ import annotations

import dataclasses
import sys
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, TextIO

import httpx

from stackctl import compose
from stackctl.core.config import Settings
from stackctl.core.errors import ConfirmationDeclined, ContainerNotFoundError, StackctlError
from stackctl.health import check_endpoints
from stackctl.runner import CommandRunner

BACKUP_STAMP_FORMAT = "%Y%m%d-%H%M%S"


@dataclass
class TargetContext:
    settings: Settings
    runner: CommandRunner
    services: List[str] = field(default_factory=list)
    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    assume_yes: bool = False
    strict: bool = False
    now: Callable[[], datetime] = datetime.now
    http_client: Optional[httpx.Client] = None

    def echo(self, message: str) -> None:
        print(message, file=self.stdout, flush=True)

    def override(self, *, services: Optional[Sequence[str]] = None, **changes: str) -> "TargetContext":
        """Copy with settings fields replaced; positional services kept unless given."""
        settings = dataclasses.replace(self.settings, **changes) if changes else self.settings
        new_services = list(self.services if services is None else services)
        return dataclasses.replace(self, settings=settings, services=new_services)

    @property
    def service(self) -> str:
        """Single-service targets: first positional service wins over SERVICE."""
        return self.services[0] if self.services else self.settings.service


TargetFunc = Callable[[TargetContext], int]


@dataclass(frozen=True)
class Target:
    name: str
    section: str
    help: str
    func: TargetFunc


REGISTRY: "OrderedDict[str, Target]" = OrderedDict()


def target(name: str, section: str, help: str) -> Callable[[TargetFunc], TargetFunc]:
    def decorator(func: TargetFunc) -> TargetFunc:
        if name in REGISTRY:
            raise ValueError(f"duplicate target: {name}")
        REGISTRY[name] = Target(name=name, section=section, help=help, func=func)
        return func
    return decorator


def alias(name: str, section: str, help: str, to: str, *, keep_services: bool = True, **overrides: str) -> None:
    """Register name as `to` run with settings overrides (mode=..., service=...)."""

    def run_alias(ctx: TargetContext) -> int:
        services = None if keep_services else []
        return run_target(to, ctx.override(services=services, **overrides))

    run_alias.__name__ = "alias_" + name.replace("-", "_")
    target(name, section, help)(run_alias)


def get_target(name: str) -> Target:
    try:
        return REGISTRY[name]
    except KeyError:
        raise StackctlError(f"unknown target: {name}") from None


def run_target(name: str, ctx: TargetContext) -> int:
    return get_target(name).func(ctx)


# =============================================================================
# Docker Services
# =============================================================================

DOCKER = "Docker Services"


@target("up", DOCKER, "Start services (stackctl up [service...], --mode prod, --args=\"--build\")")
def up(ctx: TargetContext) -> int:
    return ctx.runner.run(compose.up_command(ctx.settings, ctx.services))


@target("down", DOCKER, "Stop services (stackctl down [service...], --mode prod, --args=\"--volumes\")")
def down(ctx: TargetContext) -> int:
    return ctx.runner.run(compose.down_command(ctx.settings, ctx.services))


@target("build", DOCKER, "Build containers (stackctl build [service...], --mode prod)")
def build(ctx: TargetContext) -> int:
    return ctx.runner.run(compose.build_command(ctx.settings, ctx.services))


@target("logs", DOCKER, "View logs (stackctl logs [service], --service backend, --mode prod)")
def logs(ctx: TargetContext) -> int:
    return ctx.runner.run(compose.logs_command(ctx.settings, ctx.service), interactive=True)


@target("restart", DOCKER, "Restart services (stackctl restart [service...], --mode prod)")
def restart(ctx: TargetContext) -> int:
    return ctx.runner.run(compose.restart_command(ctx.settings, ctx.services))


def resolve_container_id(ctx: TargetContext, service: str) -> str:
    """First container id compose reports for the service."""
    output = ctx.runner.capture(compose.ps_quiet_command(ctx.settings, service))
    ids = [line.strip() for line in output.splitlines() if line.strip()]
    if not ids:
        raise ContainerNotFoundError(service, ctx.settings.compose_file)
    return ids[0]


@target("shell", DOCKER, "Open shell in container (stackctl shell [service], --service gateway, default: backend)")
def shell(ctx: TargetContext) -> int:
    container_id = resolve_container_id(ctx, ctx.service)
    return ctx.runner.run(compose.exec_shell_command(container_id), interactive=True)


@target("ps", DOCKER, "Show running containers (--mode prod for production)")
def ps(ctx: TargetContext) -> int:
    return ctx.runner.run(compose.ps_command(ctx.settings))


# =============================================================================
# Development / Production Aliases
# =============================================================================

DEV = "Convenience Aliases (Development)"
PROD = "Convenience Aliases (Production)"

alias("dev-up", DEV, "Alias: Start development environment", "up", mode="dev")
alias("dev-down", DEV, "Alias: Stop development environment", "down", mode="dev")
alias("dev-build", DEV, "Alias: Build development containers", "build", mode="dev")
alias("dev-logs", DEV, "Alias: View development logs", "logs", mode="dev")
alias("dev-restart", DEV, "Alias: Restart development services", "restart", mode="dev")
alias("dev-shell", DEV, "Alias: Open shell in backend container", "shell",
      keep_services=False, mode="dev", service="backend")
alias("dev-ps", DEV, "Alias: Show running development containers", "ps", mode="dev")
alias("backend-shell", DEV, "Alias: Open shell in backend container", "shell",
      keep_services=False, service="backend")
alias("gateway-shell", DEV, "Alias: Open shell in gateway container", "shell",
      keep_services=False, service="gateway")


@target("mongo-shell", DEV, "Open MongoDB shell (--mode prod uses the production container)")
def mongo_shell(ctx: TargetContext) -> int:
    return ctx.runner.run(compose.mongo_shell_command(ctx.settings), interactive=True)


alias("prod-up", PROD, "Alias: Start production environment", "up", mode="prod")
alias("prod-down", PROD, "Alias: Stop production environment", "down", mode="prod")
alias("prod-build", PROD, "Alias: Build production containers", "build", mode="prod")
alias("prod-logs", PROD, "Alias: View production logs", "logs", mode="prod")
alias("prod-restart", PROD, "Alias: Restart production services", "restart", mode="prod")


# =============================================================================
# Backend (local development, not Docker)
# =============================================================================

BACKEND = "Backend"


def _npm(ctx: TargetContext, script: str, *, interactive: bool = False) -> int:
    backend_dir = Path(ctx.settings.backend_dir)
    if not ctx.runner.dry_run and not backend_dir.is_dir():
        raise StackctlError(f"backend directory not found: {backend_dir}")
    return ctx.runner.run(compose.npm_command(script), cwd=backend_dir, interactive=interactive)


@target("backend-build", BACKEND, "Build backend TypeScript")
def backend_build(ctx: TargetContext) -> int:
    return _npm(ctx, "build")


@target("backend-install", BACKEND, "Install backend dependencies")
def backend_install(ctx: TargetContext) -> int:
    return _npm(ctx, "install")


@target("backend-type-check", BACKEND, "Type check backend code")
def backend_type_check(ctx: TargetContext) -> int:
    return _npm(ctx, "type-check")


@target("backend-dev", BACKEND, "Run backend in development mode (local, not Docker)")
def backend_dev(ctx: TargetContext) -> int:
    return _npm(ctx, "dev", interactive=True)


# =============================================================================
# Database
# =============================================================================

DATABASE = "Database"


def confirm(ctx: TargetContext, prompt: str) -> None:
    """Only an exact 'y' answer proceeds; EOF or anything else raises ConfirmationDeclined."""
    if ctx.assume_yes:
        return
    print(prompt, end="", file=ctx.stdout, flush=True)
    answer = ctx.stdin.readline()
    if answer.rstrip("\r\n") != "y":
        raise ConfirmationDeclined()


@target("db-reset", DATABASE, "Reset MongoDB database (WARNING: deletes all data)")
def db_reset(ctx: TargetContext) -> int:
    ctx.echo("WARNING: This will delete all data in MongoDB!")
    confirm(ctx, "Are you sure? [y/N] ")
    ctx.runner.run(compose.reset_down_command(ctx.settings))
    ctx.runner.run(compose.volume_rm_command(ctx.settings.mongo_volume), best_effort=True)
    return 0


@target("db-backup", DATABASE, "Backup MongoDB database")
def db_backup(ctx: TargetContext) -> int:
    backups_dir = ctx.settings.backups_dir
    if not ctx.runner.dry_run:
        Path(backups_dir).mkdir(parents=True, exist_ok=True)
    stamp = ctx.now().strftime(BACKUP_STAMP_FORMAT)
    destination = compose.backup_destination(backups_dir, stamp)
    ctx.runner.run(compose.mongodump_command(ctx.settings))
    ctx.runner.run(compose.backup_copy_command(ctx.settings, destination))
    ctx.echo(f"Backup saved to {compose.display_dir(backups_dir)}/")
    return 0


# =============================================================================
# Cleanup
# =============================================================================

CLEANUP = "Cleanup"


def _clean(ctx: TargetContext, flags: Sequence[str]) -> int:
    for argv in compose.clean_commands(ctx.settings, flags):
        ctx.runner.run(argv, best_effort=True)
    return 0


@target("clean", CLEANUP, "Remove containers and networks (both dev and prod)")
def clean(ctx: TargetContext) -> int:
    return _clean(ctx, compose.CLEAN_FLAGS)


@target("clean-all", CLEANUP, "Remove containers, networks, volumes, and images")
def clean_all(ctx: TargetContext) -> int:
    return _clean(ctx, compose.CLEAN_ALL_FLAGS)


@target("clean-volumes", CLEANUP, "Remove all volumes")
def clean_volumes(ctx: TargetContext) -> int:
    return _clean(ctx, compose.CLEAN_VOLUMES_FLAGS)


# =============================================================================
# Utilities
# =============================================================================

UTILITIES = "Utilities"

alias("status", UTILITIES, "Alias for ps", "ps")


@target("health", UTILITIES, "Check service health (--strict exits 1 if anything is down)")
def health(ctx: TargetContext) -> int:
    label = "production" if ctx.settings.is_prod else "development"
    ctx.echo(f"Checking {label} health...")
    results = check_endpoints(ctx.settings, client=ctx.http_client)
    for result in results:
        ctx.echo(result.render())
    if ctx.strict and not all(r.ok for r in results):
        return 1
    return 0


# =============================================================================
# Help
# =============================================================================

HELP = "Help"


def help_text() -> str:
    """Grouped target list in registration order."""
    sections: Dict[str, List[Target]] = OrderedDict()
    for t in REGISTRY.values():
        sections.setdefault(t.section, []).append(t)
    lines: List[str] = []
    for section, targets in sections.items():
        if lines:
            lines.append("")
        lines.append(f"{section}:")
        lines.extend(f"  {t.name} - {t.help}" for t in targets)
    return "\n".join(lines)


@target("help", HELP, "Display this help message")
def show_help(ctx: TargetContext) -> int:
    ctx.echo(help_text())
    return 0
