"""Resolves the runtime configuration from defaults and the user's config file.

The main entry point is :func:`resolve`, which returns a :class:`NotosConf`.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import toml


ROOT_DIR_NAME = '.notos'
CONFIG_FILE_NAMES = ('config.toml', 'config')
NOTES_DIR_DEFAULT = 'notes'
LOG_FILE_DEFAULT = 'notos.log'
LOG_LEVELS = ('trace', 'debug', 'info', 'warn', 'error')

KEY_NOTES_DIR = 'notes_dir'
KEY_LOG_FILE = 'log_file'
KEY_LOG_ENABLED = 'log_enabled'
KEY_LOG_LEVEL = 'log_level'


class ConfError(Exception):
    """Raised when the configuration cannot be determined. This is fatal at startup."""
    def __init__(self, message: str, path: Optional[Path] = None, cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause


@dataclass(frozen=True)
class NotosConf:
    """Effective configuration for one run of the tool."""

    root_dir: Path
    """The application directory, ``~/.notos``. It holds the config file and, by default, notes and logs."""

    notes_dir: Path
    """Directory holding one file per topic. Override with the ``notes_dir`` key."""

    log_file: Path
    """Where log records are appended. Override with the ``log_file`` key."""

    log_level: str = 'debug'
    """Minimum severity written to the log: one of ``trace``, ``debug``, ``info``, ``warn``, ``error``."""

    log_enabled: bool = True
    """If False, nothing is logged and no log file is created. Override with the ``log_enabled`` key."""

    @classmethod
    def defaults(cls, root_dir: Path) -> NotosConf:
        return cls(root_dir=root_dir,
                   notes_dir=root_dir.joinpath(NOTES_DIR_DEFAULT),
                   log_file=root_dir.joinpath(LOG_FILE_DEFAULT))

    @classmethod
    def for_user(cls) -> NotosConf:
        """Resolves the configuration for the current user; see :func:`resolve`."""
        return resolve()


def config_path(root_dir: Path) -> Optional[Path]:
    """Returns the path of the config file in root_dir, or None if there isn't one."""
    for name in CONFIG_FILE_NAMES:
        path = root_dir.joinpath(name)
        if path.is_file():
            return path
    return None


def _path_value(parsed: dict, key: str, root_dir: Path, config_file: Path) -> Optional[Path]:
    if key not in parsed:
        return None
    value = parsed[key]
    if not isinstance(value, str) or not value:
        raise ConfError(f'`{key}` must be a non-empty string in config file: {config_file}', config_file)
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root_dir.joinpath(path)
    return path


def _bool_value(parsed: dict, key: str, config_file: Path) -> Optional[bool]:
    if key not in parsed:
        return None
    value = parsed[key]
    if not isinstance(value, bool):
        raise ConfError(f'`{key}` must be true or false in config file: {config_file}', config_file)
    return value


def _level_value(parsed: dict, key: str, config_file: Path) -> Optional[str]:
    if key not in parsed:
        return None
    value = parsed[key]
    if not (isinstance(value, str) and value.lower() in LOG_LEVELS):
        raise ConfError(f'`{key}` must be one of {", ".join(LOG_LEVELS)} in config file: {config_file}',
                        config_file)
    return value.lower()


def load_file(conf: NotosConf, config_file: Path) -> NotosConf:
    """Overlays the settings from a TOML config file onto conf.

    Every key is optional and looked up on its own; keys that are absent keep the value from conf,
    and unknown keys are ignored. Raises :exc:`ConfError` if the file is not valid UTF-8 TOML or a
    recognized key has a value of the wrong type.
    """
    try:
        parsed = toml.loads(config_file.read_text(encoding='utf-8'))
    except UnicodeDecodeError as e:
        raise ConfError(f'Config file is not valid UTF-8: {config_file}', config_file, e)
    except toml.TomlDecodeError as e:
        raise ConfError(f'Failed to parse config file {config_file}: {e}', config_file, e)

    notes_dir = _path_value(parsed, KEY_NOTES_DIR, conf.root_dir, config_file)
    log_file = _path_value(parsed, KEY_LOG_FILE, conf.root_dir, config_file)
    log_enabled = _bool_value(parsed, KEY_LOG_ENABLED, config_file)
    log_level = _level_value(parsed, KEY_LOG_LEVEL, config_file)

    return NotosConf(
        root_dir=conf.root_dir,
        notes_dir=notes_dir if notes_dir is not None else conf.notes_dir,
        log_file=log_file if log_file is not None else conf.log_file,
        log_level=log_level if log_level is not None else conf.log_level,
        log_enabled=log_enabled if log_enabled is not None else conf.log_enabled,
    )


def resolve(home: Optional[Path] = None) -> NotosConf:
    """Determines the effective configuration and makes sure the notes directory exists.

    The application directory is ``~/.notos``. If it doesn't exist yet, it is created and the built-in
    defaults are used. Otherwise, if it contains a ``config.toml`` (or, for older installs, ``config``),
    that file's settings are applied on top of the defaults; see :func:`load_file`.

    Directories are only created when missing, so calling this repeatedly has no further effect on the
    filesystem. The log file's directory is not created here; that happens when logging is configured.

    Raises :exc:`ConfError` if the home directory can't be determined or the config file is malformed.
    OSError is raised if a directory can't be created.
    """
    if home is None:
        try:
            home = Path.home()
        except (KeyError, RuntimeError) as e:
            raise ConfError('Could not determine the home directory', cause=e)
    root_dir = Path(home).joinpath(ROOT_DIR_NAME)
    conf = NotosConf.defaults(root_dir)

    if not root_dir.exists():
        root_dir.mkdir(parents=True)
    else:
        config_file = config_path(root_dir)
        if config_file:
            conf = load_file(conf, config_file)

    if not conf.notes_dir.exists():
        conf.notes_dir.mkdir(parents=True)
    return conf
