"""Bringing the embedded Julia runtime up, lazily and once.

A Runtime is the handle the rest of jlbridge passes around. It owns the only
piece of mutable state in the bridge: whether the runtime has been started.
"""

import contextlib
import os
import sys
from typing import Callable, Iterator, MutableMapping, Optional

from jlbridge.config import RuntimeConfig, host_home, load_config
from jlbridge.endpoint import Endpoint, load_endpoint
from jlbridge.errors import InitializationFailure
import jlbridge.logging


HOST_HOME_VARIABLE = 'PYTHON_HOME'
CI_VARIABLE = 'CI'

# Loads DEPOT_PATH[1]/config/startup_mexjulia.jl unless julia was told to skip
# startup files (JLOptions().startupfile == 2 is --startup-file=no).
STARTUP_FILE_EXPRESSION = '\n'.join(
    [
        'let startupfile = !isempty(DEPOT_PATH) ? abspath(DEPOT_PATH[1], "config", "startup_mexjulia.jl") : "" ',
        '    isfile(startupfile) && Base.JLOptions().startupfile != 2 && Base.include(Main, startupfile) ',
        'end ',
    ]
)
INSTALL_INTEROP_EXPRESSION = 'using Pkg; Pkg.add("MATLAB");'
LOAD_PACKAGES_EXPRESSION = 'using MATLAB, Mex'

_logger = jlbridge.logging.get_logger(__name__)


def _needs_runtime_home_cwd() -> bool:
    # Windows resolves the DLLs libjulia depends on relative to the working
    # directory.
    return sys.platform == 'win32'


@contextlib.contextmanager
def _working_directory(path: Optional[os.PathLike]) -> Iterator[None]:
    if path is None:
        yield
        return
    original = os.getcwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(original)


class Runtime:
    """Handle on one embedded Julia runtime.

    endpoint is the native binding; when it is None the binding is imported
    on first use. config_loader supplies the paths libjulia is started with.
    environ is the environment initialization reads from and writes to.
    """

    def __init__(
        self,
        endpoint: Optional[Endpoint] = None,
        config_loader: Callable[[], RuntimeConfig] = load_config,
        environ: Optional[MutableMapping[str, str]] = None,
    ) -> None:
        self._endpoint = endpoint
        self._config_loader = config_loader
        self._environ = os.environ if environ is None else environ
        self._is_initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def endpoint(self) -> Endpoint:
        if self._endpoint is None:
            self._endpoint = load_endpoint()
        return self._endpoint

    def ensure_initialized(self) -> 'Runtime':
        """Start the runtime if it isn't running yet.

        A failed self-check leaves the runtime marked uninitialized, so the
        next call starts over from the beginning."""
        if not self._is_initialized:
            self.initialize()
            self._is_initialized = bool(self.endpoint())
            _logger.debug(
                'self-check after initialization: {}', self._is_initialized
            )
        return self

    def initialize(self) -> None:
        endpoint = self.endpoint
        config = self._config_loader()
        _logger.info('initializing Julia from {}', config.julia_home)

        cwd = config.julia_home if _needs_runtime_home_cwd() else None
        with _working_directory(cwd):
            self._environ[HOST_HOME_VARIABLE] = str(host_home())

            self._run_step(
                'starting libjulia',
                endpoint,
                False,
                str(config.julia_home),
                str(config.sys_image),
                str(config.lib_path),
            )
            self._run_step(
                'loading the startup file',
                endpoint,
                True,
                STARTUP_FILE_EXPRESSION,
            )
            if self._environ.get(CI_VARIABLE):
                self._run_step(
                    'installing MATLAB.jl',
                    endpoint,
                    True,
                    INSTALL_INTEROP_EXPRESSION,
                )
            self._run_step(
                'loading required packages',
                endpoint,
                True,
                LOAD_PACKAGES_EXPRESSION,
            )

    @staticmethod
    def _run_step(step: str, endpoint: Endpoint, *args: object) -> None:
        _logger.debug('initialization step: {}', step)
        try:
            endpoint(*args)
        except Exception as e:
            raise InitializationFailure(step, e) from e
