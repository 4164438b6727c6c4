"""
# Xilize: test_reporting.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `reporting.py`.
"""

import io
import unittest

from xilize.reporting import Reporter, format_diagnostic


class TestReporting(unittest.TestCase):
    def test_format_diagnostic(self):
        self.assertEqual(format_diagnostic('error', 'oops'), 'error: oops')
        self.assertEqual(format_diagnostic('warning', 'hmm', 'page.xil'), 'warning: `page.xil`: hmm')
        self.assertEqual(format_diagnostic('error', 'oops', 'page.xil', 7), 'error: `page.xil`, line 7: oops')

    def test_reporter_counts(self):
        stream = io.StringIO()
        reporter = Reporter(stream)
        reporter.report('translating', 'page.xil')
        reporter.warning('looks odd', 'page.xil', 3)
        reporter.error('broken', 'page.xil', 4)
        reporter.error('broken again')
        reporter.debug('details')

        self.assertEqual(reporter.error_count, 2)
        self.assertEqual(reporter.warning_count, 1)
        self.assertEqual(
            stream.getvalue(),
            'info: `page.xil`: translating\n'
            'warning: `page.xil`, line 3: looks odd\n'
            'error: `page.xil`, line 4: broken\n'
            'error: broken again\n'
            'debug: details\n'
        )

        reporter.reset_counts()
        self.assertEqual(reporter.error_count, 0)
        self.assertEqual(reporter.warning_count, 0)


if __name__ == '__main__':
    unittest.main()
