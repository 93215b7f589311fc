"""
Project ``.env`` loading for agent runs.

Agent CLIs take their API keys from the environment they are spawned in.
Before a command touches the store, the ``.env`` in the project directory
and the one beside the configured database are loaded into ``os.environ``.

Precedence:
    exported shell variables > project .env > database directory .env

``STORIES_*`` settings are resolved before these files are read, so a
``.env`` only reaches the agent processes, never the configuration.
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

from .models import StoriesConfig

logger = logging.getLogger(__name__)

ENV_FILENAME = ".env"


def project_env_files(config: StoriesConfig, project_dir: Path | None = None) -> list[Path]:
    """
    Candidate ``.env`` files for a project, highest precedence first.

    A relative database path is taken relative to the project directory.
    """
    if project_dir is None:
        project_dir = Path.cwd()

    db_dir = (project_dir / Path(config.database.path).expanduser()).parent
    candidates = [project_dir / ENV_FILENAME, db_dir / ENV_FILENAME]

    seen: set[Path] = set()
    files: list[Path] = []
    for path in candidates:
        key = path.resolve()
        if key not in seen:
            seen.add(key)
            files.append(path)
    return files


def load_project_env(config: StoriesConfig, project_dir: Path | None = None) -> list[Path]:
    """
    Load the project's ``.env`` files without overriding exported variables.

    Returns:
        The files that were found and loaded
    """
    loaded: list[Path] = []
    for path in project_env_files(config, project_dir):
        if not path.is_file():
            continue
        load_dotenv(path, override=False)
        logger.debug("Loaded environment from %s", path)
        loaded.append(path)
    return loaded
