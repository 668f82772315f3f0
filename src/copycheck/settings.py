import os
import tomllib
from pathlib import Path


CONFIG_ENVIRONMENT_VARIABLE = 'COPYCHECK_CONFIG'

SETTING_LOGGING_PATH = 'logging.path'
SETTING_LOGGING_LEVEL = 'logging.level'
SETTING_ON_READ_ERROR = 'digest.on_read_error'

READ_ERROR_ABORT = 'abort'
READ_ERROR_SKIP = 'skip'


class Settings:
    """Read-only view over an optional TOML configuration file.

    The file is schema-agnostic; consumers interpret the keys they need. A missing file is
    equivalent to an empty one, so every get() falls back to its default.

    Example:
        settings = Settings(Path('copycheck.toml'))
        policy = settings.read_error_policy
        log_path = settings.get('logging.path')
    """

    def __init__(self, path: str | os.PathLike | None = None):
        """Load settings from path, or from COPYCHECK_CONFIG when path is None.

        Args:
            path: TOML file to read. Nothing is loaded when neither path nor the
                  environment variable points at an existing file.

        Raises:
            tomllib.TOMLDecodeError: The file exists but is not valid TOML
        """
        if path is None:
            path = os.environ.get(CONFIG_ENVIRONMENT_VARIABLE)

        self._path = None if path is None else Path(path)
        self._settings = {}

        if self._path is not None and self._path.exists():
            with open(self._path, 'rb') as f:
                self._settings = tomllib.load(f)

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self, key: str, default=None):
        """Get a setting by dotted key path, e.g. 'logging.path' reads settings['logging']['path'].

        Returns default if any component of the path is missing or an intermediate value is
        not a table.
        """
        value = self._settings

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def read_error_policy(self) -> str:
        """What to do when a file opens but cannot be read to the end: 'abort' or 'skip'.

        Raises:
            ValueError: The configured value is neither 'abort' nor 'skip'
        """
        policy = self.get(SETTING_ON_READ_ERROR, READ_ERROR_ABORT)
        if policy not in (READ_ERROR_ABORT, READ_ERROR_SKIP):
            raise ValueError(f"Invalid {SETTING_ON_READ_ERROR}: {policy!r} (expected 'abort' or 'skip')")
        return policy
