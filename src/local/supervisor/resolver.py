import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from src.local import app_globals
from src.local.supervisor.errors import LaunchEnvironmentError

log = logging.getLogger(__name__)

PRODUCTION = "production"
DEVELOPMENT = "development"


@dataclass(frozen=True)
class LaunchPlan:
    """The command, arguments and working directory used to start the backend."""
    command: str
    arguments: Tuple[str, ...]
    working_directory: Path
    mode: str

    @property
    def argv(self) -> List[str]:
        return [self.command, *self.arguments]


def _current_directory() -> Path:
    """Returns the working directory, wrapping OS failures (e.g. a deleted cwd)."""
    try:
        return Path.cwd()
    except OSError as e:
        raise LaunchEnvironmentError(f"Cannot determine the current working directory: {e}") from e


def find_project_root(cwd: Path, shell_dir_name: Optional[str] = None) -> Path:
    """
    Returns the backend project root for a given working directory.

    When the shell is started from its own build-tooling subdirectory, the
    project root is the parent of that directory. Otherwise it is `cwd` itself.

    :param cwd: The directory the shell was started from.
    :param shell_dir_name: Name of the build-tooling subdirectory.
    :return: The project root.
    """
    shell_dir_name = shell_dir_name or app_globals.SHELL_DIR_NAME
    if cwd.name != shell_dir_name:
        return cwd

    parent = cwd.parent
    if parent == cwd:
        raise LaunchEnvironmentError(f"Cannot resolve the parent directory of '{cwd}'.")
    return parent


def _build_plan(argv: Sequence[str], project_root: Path, mode: str) -> LaunchPlan:
    command, *arguments = argv
    return LaunchPlan(command, tuple(arguments), project_root, mode)


def resolve_launch_plan(
    cwd: Optional[Path] = None,
    shell_dir_name: Optional[str] = None,
    server_artifact: Optional[str] = None,
    production_command: Optional[Sequence[str]] = None,
    development_command: Optional[Sequence[str]] = None,
) -> LaunchPlan:
    """
    Decides how the backend should be started.

    A pre-built server bundle under the project root selects the production
    command, otherwise the backend is run from source. The command itself is
    not checked here; a missing executable only shows up at launch time.

    :param cwd: Directory to resolve from. Defaults to the process working directory.
    :return: The resolved LaunchPlan.
    :raises LaunchEnvironmentError: If the working directory or project root cannot be determined.
    """
    cwd = cwd if cwd is not None else _current_directory()
    project_root = find_project_root(cwd, shell_dir_name)
    artifact = project_root / (server_artifact or app_globals.SERVER_ARTIFACT)

    if artifact.exists():
        plan = _build_plan(production_command or app_globals.PRODUCTION_COMMAND, project_root, PRODUCTION)
    else:
        plan = _build_plan(development_command or app_globals.DEVELOPMENT_COMMAND, project_root, DEVELOPMENT)

    log.debug(f"Resolved {plan.mode} launch plan: {' '.join(plan.argv)} (cwd: {plan.working_directory})")
    return plan
