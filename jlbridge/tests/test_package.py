"""Test the module-level functions that use the default runtime."""

import unittest
import unittest.mock as mock

import jlbridge
from jlbridge.calling import CallLayer
from jlbridge.runtime import Runtime
from jlbridge.tests.fake_endpoint import FakeEndpoint
from jlbridge.tests.test_repl_loop import ScriptedInput
from jlbridge.tests.test_runtime import example_config


class TestDefaultRuntime(unittest.TestCase):
    def test_created_once(self) -> None:
        with mock.patch.object(jlbridge, '_default_layer', None):
            layer = jlbridge.default_layer()
            self.assertIs(jlbridge.default_layer(), layer)
            self.assertIs(jlbridge.default_runtime(), layer.runtime)
            self.assertFalse(layer.runtime.is_initialized)


class TestSurface(unittest.TestCase):
    def setUp(self) -> None:
        self.endpoint = FakeEndpoint(
            {
                'f': lambda *args, **kwargs: (args, kwargs),
                'pair': lambda *args: (1, 2),
            }
        )
        layer = CallLayer(Runtime(self.endpoint, example_config, {}))
        patcher = mock.patch.object(jlbridge, '_default_layer', layer)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_ensure_initialized(self) -> None:
        runtime = jlbridge.ensure_initialized()
        self.assertTrue(runtime.is_initialized)
        jlbridge.ensure_initialized()
        self.assertEqual(self.endpoint.boot_count, 1)

    def test_calls(self) -> None:
        self.assertEqual(jlbridge.eval('1+1'), 2)
        self.assertEqual(jlbridge.eval(['1+1', '2+2']), (2, 4))
        self.assertEqual(jlbridge.call('f', 1), ((1,), {}))
        self.assertEqual(jlbridge.call_kw('f', 0, 'k', 'v'), ((), {'k': 'v'}))
        self.assertEqual(jlbridge.mex('pair', nargout=2), (1, 2))
        self.assertEqual(self.endpoint.boot_count, 1)

    def test_wrappers(self) -> None:
        self.assertEqual(jlbridge.wrap('f', 1)('a', 'k', 'v'), (('a',), {'k': 'v'}))
        self.assertEqual(jlbridge.wrap_mex('pair')(), 1)

    def test_include(self) -> None:
        jlbridge.include('/tmp/a.jl')
        self.assertEqual(
            self.endpoint.executed[-1], 'Base.include(Main,"/tmp/a.jl");'
        )

    def test_repl(self) -> None:
        results = []
        with mock.patch('builtins.input', ScriptedInput(['2+2', ';'])):
            state = jlbridge.repl(on_result=results.append)
        self.assertIs(state, jlbridge.ReplState.TERMINATED)
        self.assertEqual(results, [4])
