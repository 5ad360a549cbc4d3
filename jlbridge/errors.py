from __future__ import annotations
import builtins
import pathlib


class BridgeError(Exception):
    """Base class of every error raised by jlbridge."""


class MissingBindingError(BridgeError, builtins.ImportError):
    def __init__(self, spec: str) -> None:
        super().__init__(format_missing_binding_error(spec))
        self.spec = spec


class ConfigurationError(BridgeError):
    def __init__(
        self, message: str, path: pathlib.Path | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f'{self.message} (in {self.path})'


class ArityError(BridgeError, builtins.TypeError):
    """Raised when the arguments of a keyword call cannot be split.

    Nothing crosses into the runtime before this is raised."""


class RuntimeCallError(BridgeError):
    """The embedded runtime reported that a call failed.

    payload is whatever the runtime handed back in place of the success flag,
    kept as is so no diagnostic information is lost.
    """

    def __init__(self, payload: object) -> None:
        super().__init__(payload)
        self.payload = payload

    def __str__(self) -> str:
        return str(self.payload)

    def __repr__(self) -> str:
        return f'RuntimeCallError({self.payload!r})'


class InitializationFailure(BridgeError):
    def __init__(self, step: str, payload: object) -> None:
        super().__init__(step, payload)
        self.step = step
        self.payload = payload

    def __str__(self) -> str:
        return f'Julia initialization failed while {self.step}: {self.payload}'


def format_missing_binding_error(spec: str) -> str:
    return (
        f'It appears the mexjulia native binding ({spec}) is missing. Try '
        're-building "Mex.jl"'
    )


def format_positional_count_error() -> str:
    return (
        'The number of positional arguments exceeds the total number of '
        'arguments.'
    )


def format_odd_keyword_count_error(nkw: int) -> str:
    return f'The number of keyword arguments is {nkw}, but must be even.'


def format_empty_result_error(target: str) -> str:
    return (
        f'The native binding returned nothing for "{target}", not even a '
        'status flag. Try re-building "Mex.jl"'
    )


def format_missing_config_key_error(key: str) -> str:
    return f'The runtime configuration does not define {key}'


def format_unknown_config_key_error(key: str) -> str:
    return f'{key} is not a runtime configuration setting'


def format_duplicate_config_key_error(key: str) -> str:
    return f'{key} is set more than once in the runtime configuration'
