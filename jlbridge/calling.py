"""Calling conventions for reaching into Julia.

Every public operation builds a CallRequest and hands it to
CallLayer._dispatch, which makes sure the runtime is up and then talks to the
native binding.
"""

import dataclasses
import enum
import os
import pathlib
from typing import List, Optional, Sequence, Tuple, Union

import numpy

from jlbridge.endpoint import MEX_TAG
from jlbridge.errors import (
    ArityError,
    RuntimeCallError,
    format_empty_result_error,
    format_odd_keyword_count_error,
    format_positional_count_error,
)
import jlbridge.logging
from jlbridge.runtime import Runtime


EVAL_ENTRY_POINT = 'Mex.jl_eval'
CALL_KW_ENTRY_POINT = 'Mex.jl_call_kw'
ALL_POSITIONAL = -1

_logger = jlbridge.logging.get_logger(__name__)


class CallKind(enum.Enum):
    RAW_EVAL = 'raw-eval'
    MEX = 'mex-call'
    KEYWORD = 'keyword-call'


@dataclasses.dataclass(frozen=True)
class CallRequest:
    kind: CallKind
    target: str
    arguments: Tuple[object, ...] = ()
    positional_count: int = ALL_POSITIONAL
    nargout: int = 1

    def endpoint_arguments(self) -> Tuple[object, ...]:
        if self.kind is CallKind.RAW_EVAL:
            return (True, self.target)
        if self.kind is CallKind.KEYWORD:
            # Every negative count means the same thing, so they all travel
            # as ALL_POSITIONAL and always fit in an int32.
            return (
                MEX_TAG,
                CALL_KW_ENTRY_POINT,
                self.target,
                numpy.int32(max(self.positional_count, ALL_POSITIONAL)),
                *self.arguments,
            )
        return (MEX_TAG, self.target, *self.arguments)


def split_arguments(
    npos: int, args: Sequence[object]
) -> Tuple[Tuple[object, ...], List[Tuple[object, object]]]:
    """Split args into the positional prefix and (key, value) pairs.

    With a negative npos everything is positional."""
    _check_arity(npos, len(args))
    if npos < 0:
        return tuple(args), []
    keywords = args[npos:]
    return tuple(args[:npos]), list(zip(keywords[::2], keywords[1::2]))


def _check_arity(npos: int, nargs: int) -> None:
    if npos < 0:
        return
    nkw = nargs - npos
    if nkw < 0:
        raise ArityError(format_positional_count_error())
    if nkw % 2 != 0:
        raise ArityError(format_odd_keyword_count_error(nkw))


def _is_status(value: object) -> bool:
    return isinstance(value, (bool, numpy.bool_))


def _fit(values: Sequence[object], nargout: int) -> List[object]:
    # Extra results are dropped and missing ones become None.
    fitted = list(values[:nargout])
    fitted.extend([None] * (nargout - len(fitted)))
    return fitted


def _shape(values: List[object], nargout: int) -> object:
    if nargout == 0:
        return None
    if nargout == 1:
        return values[0]
    return tuple(values)


def _julia_string_literal(text: str) -> str:
    escaped = (
        text.replace('\\', '\\\\').replace('"', '\\"').replace('$', '\\$')
    )
    return f'"{escaped}"'


def forward_slashify(path: Union[str, os.PathLike]) -> str:
    if not isinstance(path, pathlib.PurePath):
        path = pathlib.PurePath(path)
    return path.as_posix()


class CallLayer:
    def __init__(self, runtime: Runtime) -> None:
        self.runtime = runtime

    def mex(self, target: str, *args: object, nargout: int = 1) -> object:
        """Call a Julia function that speaks the MEX convention.

        Such a function receives all of its arguments as one vector and
        returns any number of values. nargout is the number of values
        wanted: 1 gives the value itself, 0 gives None and anything else gives
        a tuple of that length.
        """
        values = self._dispatch(
            CallRequest(CallKind.MEX, target, args, nargout=nargout)
        )
        return _shape(values, nargout)

    def eval(
        self, expr: Union[str, Sequence[str]], nargout: Optional[int] = None
    ) -> object:
        """Evaluate Julia source code.

        A single string gives a single value. A sequence of strings gives a
        tuple with one value per expression, in order."""
        if isinstance(expr, str):
            return self.mex(
                EVAL_ENTRY_POINT, expr, nargout=1 if nargout is None else nargout
            )
        expressions = list(expr)
        if nargout is None:
            nargout = len(expressions)
        values = self._dispatch(
            CallRequest(
                CallKind.MEX, EVAL_ENTRY_POINT, (expressions,), nargout=nargout
            )
        )
        return tuple(values)

    def call_kw(
        self, target: str, npos: int, *args: object, nargout: int = 1
    ) -> object:
        """Call the Julia function named target.

        The first npos arguments are positional; the rest alternate key,
        value, key, value. A negative npos makes every argument positional.
        """
        _check_arity(npos, len(args))
        values = self._dispatch(
            CallRequest(
                CallKind.KEYWORD,
                target,
                args,
                positional_count=npos,
                nargout=nargout,
            )
        )
        return _shape(values, nargout)

    def call(self, target: str, *args: object, nargout: int = 1) -> object:
        return self.call_kw(target, ALL_POSITIONAL, *args, nargout=nargout)

    def include(self, path: Union[str, os.PathLike]) -> None:
        """Run the Julia source file at path in Main."""
        expression = 'Base.include(Main,{});'.format(
            _julia_string_literal(forward_slashify(path))
        )
        self._dispatch(CallRequest(CallKind.RAW_EVAL, expression, nargout=0))

    def _dispatch(self, request: CallRequest) -> List[object]:
        if request.nargout < 0:
            raise ValueError(
                f'nargout must not be negative, got {request.nargout}'
            )
        self.runtime.ensure_initialized()
        endpoint = self.runtime.endpoint
        _logger.debug(
            '{} call to {!r} with {} argument(s)',
            request.kind.value,
            request.target,
            len(request.arguments),
        )
        if request.kind is CallKind.RAW_EVAL:
            try:
                endpoint(*request.endpoint_arguments())
            except Exception as e:
                raise RuntimeCallError(e) from e
            return []
        # The binding always produces a status, so at least one slot is
        # requested even when the caller wants nothing back.
        results = endpoint(
            *request.endpoint_arguments(), nargout=max(1, request.nargout)
        )
        if not results:
            raise RuntimeCallError(format_empty_result_error(request.target))
        status, *values = results
        if not _is_status(status):
            if isinstance(status, BaseException):
                raise RuntimeCallError(status) from status
            raise RuntimeCallError(status)
        return _fit(values, request.nargout)
