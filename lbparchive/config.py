"""Reading of the YAML configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

import yaml

DEFAULT_CONFIG_PATH = Path("config.yml")

_DEFAULT_CONFIG = """\
# Path to the level database
database_path: dry.db
# Directory the level backups are written to
backup_directory: backups
# Where resources are downloaded from: archive, refresh or bonsai
download_server: archive
# Number of downloads running at the same time, at most 10
max_parallel_downloads: 5
# Write the backup for the game the level was saved in rather than the one listed in the database
fix_backup_version: true
# Always write LBP3 backups
force_lbp3_backups: false
"""


class DownloadServer(Enum):
    BONSAI = "bonsai"
    REFRESH = "refresh"
    ARCHIVE = "archive"

    def url_for(self, sha1: bytes) -> str:
        """URL of the resource with the given SHA-1 on this server."""
        h = sha1.hex()
        if self is DownloadServer.ARCHIVE:
            return (
                f"https://archive.org/download/dry23r{h[0]}/dry{h[:2]}.zip/"
                f"{h[:2]}%2F{h[2:4]}%2F{h}"
            )
        return f"https://lbp.littlebigrefresh.com/api/v3/assets/{h}/download"


@dataclass(frozen=True)
class Config:
    database_path: Path
    backup_directory: Path
    download_server: DownloadServer
    max_parallel_downloads: int
    fix_backup_version: bool
    force_lbp3_backups: bool


def _field(data: dict, name: str) -> Any:
    if name not in data:
        raise ValueError(f"Couldn't parse config: missing field `{name}`")
    return data[name]


def _path(data: dict, name: str) -> Path:
    value = _field(data, name)
    if not isinstance(value, str):
        raise ValueError(f"Couldn't parse config: `{name}` must be a path")
    return Path(value)


def _flag(data: dict, name: str) -> bool:
    value = _field(data, name)
    if not isinstance(value, bool):
        raise ValueError(f"Couldn't parse config: `{name}` must be true or false")
    return value


def _parse(data: Any) -> Config:
    if not isinstance(data, dict):
        raise ValueError("Couldn't parse config: expected a mapping")

    server = _field(data, "download_server")
    try:
        download_server = DownloadServer(server)
    except ValueError:
        raise ValueError(f"Couldn't parse config: unknown download server {server!r}") from None

    parallel = _field(data, "max_parallel_downloads")
    if isinstance(parallel, bool) or not isinstance(parallel, int) or parallel < 0:
        raise ValueError("Couldn't parse config: `max_parallel_downloads` must be a non-negative integer")

    return Config(
        database_path=_path(data, "database_path"),
        backup_directory=_path(data, "backup_directory"),
        download_server=download_server,
        max_parallel_downloads=parallel,
        fix_backup_version=_flag(data, "fix_backup_version"),
        force_lbp3_backups=_flag(data, "force_lbp3_backups"),
    )


def read_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Config:
    """Read the configuration, writing the default one first if the file is missing."""
    config_path = Path(path)
    if not config_path.exists():
        print(f"{config_path.name} is missing, writing default config")
        config_path.write_text(_DEFAULT_CONFIG, encoding="utf-8")

    with config_path.open(encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ValueError(f"Couldn't parse config: {exc}") from exc
    return _parse(data)