"""Call Julia from Python through the mexjulia native binding.

The functions here work on a process-wide default runtime that is created on
first use and started the first time a call needs it. Embedders that want to
control the binding or the configuration create their own Runtime and
CallLayer instead.
"""

import os
from typing import Callable, Optional, Sequence, Union

from jlbridge.calling import ALL_POSITIONAL, CallLayer
from jlbridge.repl_loop import DEFAULT_PROMPT, ReplState
import jlbridge.repl_loop
from jlbridge.runtime import Runtime
import jlbridge.wrapper
from jlbridge.wrapper import BoundCallable


version = '0.1.0'

_default_layer: Optional[CallLayer] = None


def default_layer() -> CallLayer:
    global _default_layer
    if _default_layer is None:
        _default_layer = CallLayer(Runtime())
    return _default_layer


def default_runtime() -> Runtime:
    return default_layer().runtime


def ensure_initialized() -> Runtime:
    return default_runtime().ensure_initialized()


def mex(target: str, *args: object, nargout: int = 1) -> object:
    return default_layer().mex(target, *args, nargout=nargout)


def eval(
    expr: Union[str, Sequence[str]], nargout: Optional[int] = None
) -> object:
    return default_layer().eval(expr, nargout=nargout)


def call_kw(target: str, npos: int, *args: object, nargout: int = 1) -> object:
    return default_layer().call_kw(target, npos, *args, nargout=nargout)


def call(target: str, *args: object, nargout: int = 1) -> object:
    return default_layer().call(target, *args, nargout=nargout)


def include(path: Union[str, os.PathLike]) -> None:
    default_layer().include(path)


def wrap(target: str, npos: int = ALL_POSITIONAL) -> BoundCallable:
    return jlbridge.wrapper.wrap(default_layer(), target, npos)


def wrap_mex(target: str) -> BoundCallable:
    return jlbridge.wrapper.wrap_mex(default_layer(), target)


def repl(
    prompt: str = DEFAULT_PROMPT,
    is_done: Optional[Callable[[str], bool]] = None,
    on_result: Optional[Callable[[object], None]] = None,
) -> ReplState:
    return jlbridge.repl_loop.repl(
        default_layer(), prompt, is_done, on_result=on_result
    )
