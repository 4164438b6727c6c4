"""
# Xilize: test_scopes.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `scopes.py`.
"""

import io
import unittest

from xilize.bases import Signature
from xilize.catalogs import Catalog, CatalogEntry
from xilize.exceptions import SignatureOverrideException, XilizeException
from xilize.reporting import Reporter
from xilize.scopes import Environment, Scope


def create_scope_pair():
    stream = io.StringIO()
    parent_scope = Scope(environment=Environment(Reporter(stream)), source='parent')
    child_scope = Scope(parent_scope, source='child')
    return parent_scope, child_scope, stream


class TestScopes(unittest.TestCase):
    def test_scope_keys(self):
        parent_scope, child_scope, _ = create_scope_pair()
        parent_scope.define('title', 'Home')
        self.assertEqual(child_scope.value('title'), 'Home')
        self.assertTrue(child_scope.is_defined('title'))
        self.assertEqual(child_scope.value('nope'), '')
        self.assertFalse(child_scope.is_defined('nope'))

        child_scope.define('title', 'Away')
        self.assertEqual(child_scope.value('title'), 'Away')
        self.assertEqual(parent_scope.value('title'), 'Home')

        child_scope.undefine('title')
        self.assertFalse(child_scope.is_defined('title'))
        self.assertTrue(parent_scope.is_defined('title'))

    def test_scope_key_helpers(self):
        _, scope, _ = create_scope_pair()
        scope.define('flag', 'Yes')
        self.assertTrue(scope.is_value_true('flag'))
        self.assertFalse(scope.is_value_true('missing'))

        scope.define_append('css', 'a.css')
        scope.define_append('css', ' b.css')
        self.assertEqual(scope.value('css'), 'a.css b.css')

        scope.define_default('css', 'c.css')
        scope.define_default('title', 'Untitled')
        self.assertEqual(scope.value('css'), 'a.css b.css')
        self.assertEqual(scope.value('title'), 'Untitled')

        scope.define_all({'one': '1', 'two': '2'})
        self.assertEqual(scope.value('two'), '2')

    def test_scope_abbreviations(self):
        parent_scope, child_scope, _ = create_scope_pair()
        parent_scope.add_abbreviation('xil', 'http://xilize.sourceforge.net')
        child_scope.add_abbreviation('ex', 'http://example.com')
        self.assertEqual(child_scope.lookup_url('xil'), 'http://xilize.sourceforge.net')
        self.assertEqual(child_scope.lookup_url('ex'), 'http://example.com')
        self.assertIsNone(parent_scope.lookup_url('ex'))

    def test_scope_signatures(self):
        parent_scope, child_scope, stream = create_scope_pair()
        parent_scope.define('_UnsignedBlockSigName_', 'anonymous')
        parent_scope.define('_WarnOnSigOverride_', 'true')
        parent_scope.register_signature(Signature('anonymous'))
        parent_scope.register_signature(Signature('raw'))

        with self.assertRaises(SignatureOverrideException):
            child_scope.register_signature(Signature('raw'))

        child_scope.register_signature(Signature('raw'), is_custom=True, line_number=3)
        self.assertEqual(
            stream.getvalue(),
            'warning: `child`, line 3: signature override: raw is also native signature\n',
        )

        child_scope.register_signature(Signature('shout'), is_custom=True)
        Scope(child_scope, source='grandchild').register_signature(Signature('shout'), is_custom=True)
        self.assertIn('shout is also defined in child', stream.getvalue())

        self.assertEqual(child_scope.get_signature('raw').name, 'raw')
        self.assertEqual(child_scope.get_signature('unknown').name, 'anonymous')
        self.assertEqual(child_scope.signature_names(), ['anonymous', 'raw', 'shout'])

        instance = child_scope.get_signature('raw', '(note)')
        self.assertEqual(instance.tag_attributes(), ' class="note"')
        self.assertEqual(child_scope.get_signature('raw').tag_attributes(), '')

    def test_scope_signature_fallback_missing(self):
        scope = Scope()
        with self.assertRaises(XilizeException):
            scope.get_signature('p')

    def test_scope_catalog(self):
        parent_scope, child_scope, _ = create_scope_pair()
        self.assertIsNone(child_scope.catalog)
        self.assertEqual(child_scope.unique_id(), '')
        self.assertFalse(child_scope.has_catalog_listener(CatalogEntry('', '', 1)))

        parent_scope.catalog = Catalog('xil_')
        self.assertIs(child_scope.catalog, parent_scope.catalog)
        self.assertEqual(child_scope.unique_id(), 'xil_1')

    def test_scope_diagnostics(self):
        parent_scope, child_scope, stream = create_scope_pair()
        child_scope.warning('first', 2)
        child_scope.error('second')
        child_scope.debug('hidden')
        parent_scope.define('_NoWarn_', 'true')
        parent_scope.define('_Debug_', 'true')
        child_scope.warning('suppressed')
        child_scope.debug('shown')

        self.assertEqual(
            stream.getvalue(),
            'warning: `child`, line 2: first\n'
            'error: `child`: second\n'
            'debug: `child`: shown\n'
        )
        self.assertEqual(child_scope.reporter.error_count, 1)
        self.assertEqual(child_scope.reporter.warning_count, 1)

    def test_environment(self):
        environment = Environment(Reporter(io.StringIO()))
        self.assertFalse(environment.is_halted)
        environment.halt()
        self.assertTrue(environment.is_halted)
        environment.reset()
        self.assertFalse(environment.is_halted)
        self.assertIs(environment.evaluator, environment.evaluator)


if __name__ == '__main__':
    unittest.main()
