"""Runtime settings for the embedded Julia.

The settings live in a small text file, conventionally named jldict, which is
written when Mex.jl is built:

    # written by Mex.jl
    julia_home = "/opt/julia/bin"
    sys_image = "/opt/julia/lib/julia/sys.so"
    lib_path = "/opt/julia/lib/libjulia.so"

Values are double-quoted strings taken literally, so Windows paths like
"C:\\Julia\\bin" need no escaping. Only \\" (a quote) and \\\\ (a backslash)
are escapes; any other backslash is kept as written.
"""

import dataclasses
import os
import pathlib
import sys
from typing import Dict, Mapping, Optional, Tuple

import parsy
from parsy import regex, seq, string

from jlbridge.errors import (
    ConfigurationError,
    format_duplicate_config_key_error,
    format_missing_config_key_error,
    format_unknown_config_key_error,
)


CONFIG_VARIABLE = 'JLBRIDGE_CONFIG'
DEFAULT_CONFIG_PATH = pathlib.Path('~/.jlbridge/jldict')


@dataclasses.dataclass(frozen=True)
class RuntimeConfig:
    julia_home: pathlib.Path
    sys_image: pathlib.Path
    lib_path: pathlib.Path


_KEYS = tuple(field.name for field in dataclasses.fields(RuntimeConfig))

_padding = regex(r'[ \t]*')
_comment = regex(r'#.*')
_key = regex(r'[A-Za-z_][A-Za-z0-9_]*').desc('setting name')
_escape = string('\\') >> (string('\\') | string('"'))
_quoted = (
    string('"')
    >> (regex(r'[^"\\]+') | _escape | string('\\')).many().concat()
    << string('"')
).desc('quoted string')
_setting = seq(_key << _padding << string('=') << _padding, _quoted).map(tuple)
_line = _padding >> _setting.optional() << _padding << _comment.optional()


def parse_config(
    text: str, path: Optional[pathlib.Path] = None
) -> RuntimeConfig:
    settings: Dict[str, str] = {}
    for number, line in enumerate(text.splitlines(), start=1):
        try:
            setting: Optional[Tuple[str, str]] = _line.parse(line)
        except parsy.ParseError as e:
            raise ConfigurationError(
                f'Cannot parse line {number}: {e}', path
            ) from e
        if setting is None:
            continue
        key, value = setting
        if key not in _KEYS:
            raise ConfigurationError(format_unknown_config_key_error(key), path)
        if key in settings:
            raise ConfigurationError(
                format_duplicate_config_key_error(key), path
            )
        settings[key] = value
    for key in _KEYS:
        if key not in settings:
            raise ConfigurationError(format_missing_config_key_error(key), path)
    return RuntimeConfig(
        **{key: pathlib.Path(value) for key, value in settings.items()}
    )


def config_path(environ: Optional[Mapping[str, str]] = None) -> pathlib.Path:
    if environ is None:
        environ = os.environ
    if environ.get(CONFIG_VARIABLE):
        return pathlib.Path(environ[CONFIG_VARIABLE])
    return DEFAULT_CONFIG_PATH.expanduser()


def load_config(
    path: Optional[pathlib.Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RuntimeConfig:
    if path is None:
        path = config_path(environ)
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(
            f'Cannot read the runtime configuration: {e.strerror}', path
        ) from e
    return parse_config(text, path)


def host_home() -> pathlib.Path:
    """The root of the Python installation hosting jlbridge.

    Inside a virtual environment this is the base installation, which is where
    the shared library Julia needs to find lives."""
    return pathlib.Path(sys.base_prefix)
