"""
Command construction for docker compose, docker, npm and mongodump.
Pure functions: every builder returns an argv list and runs nothing.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import List, Sequence

from stackctl.core.config import Settings

BACKUP_CONTAINER_DIR = "/tmp/backup"

# Cleanup flag sets, applied to both compose files.
CLEAN_FLAGS = ("--remove-orphans",)
CLEAN_ALL_FLAGS = ("--rmi", "all", "--volumes", "--remove-orphans")
CLEAN_VOLUMES_FLAGS = ("-v",)


def compose_base(compose_file: str) -> List[str]:
    return ["docker", "compose", "-f", compose_file]


def compose_command(settings: Settings, subcommand: str, *args: str) -> List[str]:
    """docker compose -f <mode compose file> <subcommand> <args...>"""
    return compose_base(settings.compose_file) + [subcommand, *args]


def up_command(settings: Settings, services: Sequence[str] = ()) -> List[str]:
    return compose_command(settings, "up", "-d", *settings.extra_args, *services)


def down_command(settings: Settings, services: Sequence[str] = ()) -> List[str]:
    return compose_command(settings, "down", *settings.extra_args, *services)


def build_command(settings: Settings, services: Sequence[str] = ()) -> List[str]:
    return compose_command(settings, "build", *settings.extra_args, *services)


def restart_command(settings: Settings, services: Sequence[str] = ()) -> List[str]:
    return compose_command(settings, "restart", *settings.extra_args, *services)


def logs_command(settings: Settings, service: str) -> List[str]:
    return compose_command(settings, "logs", "-f", service)


def ps_command(settings: Settings) -> List[str]:
    return compose_command(settings, "ps")


def ps_quiet_command(settings: Settings, service: str) -> List[str]:
    """Lists container ids for one service, one per line."""
    return compose_command(settings, "ps", "-q", service)


def exec_shell_command(container_id: str) -> List[str]:
    return ["docker", "exec", "-it", container_id, "sh"]


def mongo_shell_command(settings: Settings) -> List[str]:
    return [
        "docker", "exec", "-it", settings.mongo_container,
        "mongosh", "-u", settings.mongo_user, "-p", settings.mongo_password,
    ]


def npm_command(script: str) -> List[str]:
    """`install` is an npm builtin; everything else goes through `npm run`."""
    if script == "install":
        return ["npm", "install"]
    return ["npm", "run", script]


def mongodump_command(settings: Settings) -> List[str]:
    return [
        "docker", "exec", settings.mongo_container,
        "mongodump", f"--uri={settings.mongo_uri}", f"--out={BACKUP_CONTAINER_DIR}",
    ]


def backup_copy_command(settings: Settings, destination: str) -> List[str]:
    return ["docker", "cp", f"{settings.mongo_container}:{BACKUP_CONTAINER_DIR}", destination]


def display_dir(path: str) -> str:
    """Relative paths render as ./<path>, the way the shell recipe writes them."""
    p = PurePosixPath(path)
    if p.is_absolute():
        return str(p)
    return "./" + str(p)


def backup_destination(backups_dir: str, stamp: str) -> str:
    return display_dir(str(PurePosixPath(backups_dir) / f"backup-{stamp}"))


def volume_rm_command(volume: str) -> List[str]:
    return ["docker", "volume", "rm", volume]


def reset_down_command(settings: Settings) -> List[str]:
    """Stops the mode's stack and removes its volumes."""
    return compose_command(settings, "down", "-v")


def clean_commands(settings: Settings, flags: Sequence[str]) -> List[List[str]]:
    """One `down` per compose file, dev first, then prod."""
    return [compose_base(f) + ["down", *flags] for f in settings.compose_files]
