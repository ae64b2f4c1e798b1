"""
Cliogram process-wide settings.

Keys
- "api-version": version string answered to --version. Lazily taken from the
  host application's __main__.__version__, else from the project.version of a
  pyproject.toml found in the working directory, else "" (with a warning).
- "parsing-error-status": status marker attached to parsing-time faults
  (default 700).

Values are computed on first read and kept until set() or reset().
"""
import logging
import os
import tomllib

logger = logging.getLogger(__name__)

_values = {}


def _api_version():
    version = getattr(__import__("__main__"), "__version__", None)
    if isinstance(version, str):
        return version

    path = os.path.join(os.getcwd(), "pyproject.toml")
    try:
        with open(path, "rb") as stream:
            version = tomllib.load(stream).get("project", {}).get("version")
    except FileNotFoundError:
        version = None
    except (OSError, tomllib.TOMLDecodeError) as error:
        logger.warning("cannot read %s: %s", path, error)
        version = None

    if isinstance(version, str):
        return version

    logger.warning("no api version configured; --version is disabled")
    return ""


_defaults = {
    "api-version": _api_version,
    "parsing-error-status": lambda: 700,
}


def get(key, /):
    """
    Return the value of a setting, computing its default on first access.

    Raises KeyError for unknown keys.
    """
    if key not in _defaults:
        raise KeyError("unknown setting %r" % key)
    if key not in _values:
        _values[key] = _defaults[key]()
        logger.debug("setting %r defaults to %r", key, _values[key])
    return _values[key]


def set(key, value, /):
    if key not in _defaults:
        raise KeyError("unknown setting %r" % key)
    if key == "api-version" and not isinstance(value, str):
        raise TypeError("setting 'api-version' must be a string")
    _values[key] = value


def reset(*keys):
    """
    Forget the given settings (all of them when called without keys).
    """
    for key in keys or tuple(_values):
        _values.pop(key, None)


__all__ = (
    "get",
    "set",
    "reset",
)
