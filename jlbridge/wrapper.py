"""Julia functions as Python callables."""

import dataclasses

from jlbridge.calling import ALL_POSITIONAL, CallKind, CallLayer


@dataclasses.dataclass(frozen=True)
class BoundCallable:
    target: str
    positional_count: int
    kind: CallKind
    layer: CallLayer = dataclasses.field(repr=False, compare=False)

    def __call__(self, *args: object, nargout: int = 1) -> object:
        if self.kind is CallKind.MEX:
            return self.layer.mex(self.target, *args, nargout=nargout)
        return self.layer.call_kw(
            self.target, self.positional_count, *args, nargout=nargout
        )


def wrap(
    layer: CallLayer, target: str, npos: int = ALL_POSITIONAL
) -> BoundCallable:
    """Return a Python callable forwarding to CallLayer.call_kw.

    npos, if given, is the number of arguments treated as positional.
    """
    return BoundCallable(target, npos, CallKind.KEYWORD, layer)


def wrap_mex(layer: CallLayer, target: str) -> BoundCallable:
    """Return a Python callable forwarding to CallLayer.mex.

    Unlike wrap, this starts the runtime right away."""
    layer.runtime.ensure_initialized()
    return BoundCallable(target, ALL_POSITIONAL, CallKind.MEX, layer)
