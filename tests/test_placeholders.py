"""
# Xilize: test_placeholders.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `placeholders.py`.
"""

import unittest
import warnings

from xilize.placeholders import PlaceholderMaster


class TestPlaceholders(unittest.TestCase):
    def test_placeholder_master_protect(self):
        placeholder_master = PlaceholderMaster()
        self.assertEqual(placeholder_master.protect('<b>'), '\uF8FF\uE000\uF8FF')
        self.assertEqual(placeholder_master.protect('</b>'), '\uF8FF\uE001\uF8FF')
        for _ in range(8):
            placeholder_master.protect('')
        self.assertEqual(placeholder_master.protect('tenth'), '\uF8FF\uE001\uE000\uF8FF')
        self.assertEqual(placeholder_master.snippet_count, 11)

    def test_placeholder_master_unprotect(self):
        placeholder_master = PlaceholderMaster()
        opening = placeholder_master.protect('<b>')
        closing = placeholder_master.protect('</b>')
        self.assertEqual(placeholder_master.unprotect(f'{opening}bold{closing}'), '<b>bold</b>')
        self.assertEqual(placeholder_master.unprotect('no placeholders'), 'no placeholders')

        nested = placeholder_master.protect(f'<i>{opening}x{closing}</i>')
        self.assertEqual(placeholder_master.unprotect(nested), '<i><b>x</b></i>')

    def test_placeholder_master_unprotect_unknown_index(self):
        placeholder_master = PlaceholderMaster()
        with warnings.catch_warnings(record=True) as caught_warnings:
            warnings.simplefilter('always')
            self.assertEqual(placeholder_master.unprotect('\uF8FF\uE005\uF8FF'), '\uF8FF\uE005\uF8FF')
        self.assertEqual(len(caught_warnings), 1)

    def test_placeholder_master_replace_marker_occurrences(self):
        placeholder_master = PlaceholderMaster()
        string = placeholder_master.replace_marker_occurrences('a\uF8FFb')
        self.assertEqual(string, 'a\uF8FF\uE000\uF8FFb')
        self.assertEqual(placeholder_master.unprotect(string), 'a\uF8FFb')

    def test_placeholder_masters_are_independent(self):
        first_master = PlaceholderMaster()
        second_master = PlaceholderMaster()
        self.assertEqual(first_master.protect('one'), second_master.protect('two'))
        self.assertEqual(first_master.unprotect('\uF8FF\uE000\uF8FF'), 'one')
        self.assertEqual(second_master.unprotect('\uF8FF\uE000\uF8FF'), 'two')


if __name__ == '__main__':
    unittest.main()
