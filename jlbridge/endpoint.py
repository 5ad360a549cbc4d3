"""The contract jlbridge expects of the native mexjulia binding.

The binding is a single callable with several call forms, distinguished by the
first argument:

    endpoint()                                      -- is the runtime live?
    endpoint(False, julia_home, sys_image, lib_path) -- low-level startup
    endpoint(True, expression)                      -- run code for effect
    endpoint('jl_mex', target, *args, nargout=n)    -- MEX-like call

The MEX-like form returns a sequence whose first item is the success flag (a
bool) or, on failure, the runtime's error value.
"""

import importlib
import os
from typing import Mapping, Optional, Sequence, Union, overload
from typing_extensions import Literal, Protocol

from jlbridge.errors import MissingBindingError
import jlbridge.logging


DEFAULT_ENDPOINT = 'mexjulia:mexjulia'
ENDPOINT_VARIABLE = 'JLBRIDGE_ENDPOINT'
MEX_TAG = 'jl_mex'

_logger = jlbridge.logging.get_logger(__name__)


class Endpoint(Protocol):
    @overload
    def __call__(self) -> bool:
        ...

    @overload
    def __call__(
        self,
        is_eval: Literal[False],
        julia_home: str,
        sys_image: str,
        lib_path: str,
    ) -> None:
        ...

    @overload
    def __call__(self, is_eval: Literal[True], expression: str) -> None:
        ...

    @overload
    def __call__(
        self, tag: str, target: str, *args: object, nargout: int
    ) -> Sequence[object]:
        ...

    def __call__(self, *args: object, **kwargs: object) -> Union[
        bool, None, Sequence[object]
    ]:
        ...


def endpoint_spec(environ: Optional[Mapping[str, str]] = None) -> str:
    if environ is None:
        environ = os.environ
    return environ.get(ENDPOINT_VARIABLE) or DEFAULT_ENDPOINT


def load_endpoint(spec: Optional[str] = None) -> Endpoint:
    """Import the native binding named by spec ('module:attribute').

    Without an attribute part the attribute is assumed to have the same name
    as the module, which is how mexjulia ships."""
    if spec is None:
        spec = endpoint_spec()
    module_name, _, attribute = spec.partition(':')
    if not attribute:
        attribute = module_name.rpartition('.')[2]
    _logger.debug('loading native binding {!r}', spec)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise MissingBindingError(spec) from e
    try:
        endpoint = getattr(module, attribute)
    except AttributeError as e:
        raise MissingBindingError(spec) from e
    if not callable(endpoint):
        raise MissingBindingError(spec)
    return endpoint
