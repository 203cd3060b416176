import os
import sys
from pathlib import Path
from dataclasses import dataclass

APP_NAME = "RaceTimer"

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the per-user base folder. RACETIMER_HOME always wins, then APPDATA on Windows, then XDG on everything else.
def _user_data_root() -> Path:
    override = os.getenv("RACETIMER_HOME")
    if override:
        return Path(override)
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise RuntimeError("Missing APPDATA environment variable, cannot determine data directories.")
        return Path(appdata) / APP_NAME
    xdg = os.getenv("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / APP_NAME

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path
    exports: Path

    @staticmethod
    def build():
        # Folder for all user-specific stuff. Race data itself is never saved here, only settings, logs and the
        # default location offered for exports.
        data = ensure_directory(_user_data_root())
        logs = ensure_directory(data / "logs")
        exports = Path.home() / "Documents"
        if not exports.is_dir():
            exports = Path.home()

        return ProjectPaths(
            data = data,
            logs = logs,
            exports = exports,
        )
PATHS = ProjectPaths.build()
