"""
# Xilize: constants.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Constants.
"""

OKAY_EXIT_CODE = 0
GENERIC_ERROR_EXIT_CODE = 1
COMMAND_LINE_ERROR_EXIT_CODE = 2
FATAL_EXIT_CODE = 3
USER_HALT_EXIT_CODE = 4
IO_ERROR_EXIT_CODE = 5

XIL_FILE_EXTENSION = '.xil'
SOURCE_DESCRIPTION_FOR_STRINGS = '<string>'

MACRO_ERROR_TOKEN = '==!!MACRO ERROR!!=='

DEFAULT_VALUE_FROM_KEY = {
    '_LineCommentString_': '>xil>',
    '_BlockStartString_': '{{',
    '_BlockEndString_': '}}',
    '_SpacesPerTab_': '4',
    '_PreStringWrap_': '0',
    '_IdPrefix_': 'xil_',
    '_UnsignedBlockSigName_': 'anonymous',
    '_UnsignedBlockSigSubstitute_': 'p',
    '_NaturalSig_': 'h1',
    '_Natural_': 'true',
    '_FootnoteStyle_': 'modern',
    '_WarnOnSigOverride_': 'true',
    '_OutputExtension_': 'html',
    '_DebugReportRawBlocks_': 'false',
    'prolog': 'true',
    'epilog': 'true',
    'doctype': 'strict',
    'charset': 'utf-8',
}

XHTML_DOCTYPE_FROM_NAME = {
    'strict':
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd">\n',
    'trans':
        '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" '
        '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">\n',
}

HTML_TAG_NAMES = (
    'a', 'abbr', 'acronym', 'address', 'applet', 'area', 'b', 'base', 'basefont', 'bdo', 'big',
    'blockquote', 'body', 'br', 'button', 'caption', 'center', 'cite', 'code', 'col', 'colgroup', 'dd',
    'del', 'dfn', 'dir', 'div', 'dl', 'dt', 'em', 'fieldset', 'font', 'form', 'frame', 'frameset',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'head', 'hr', 'html', 'i', 'iframe', 'img', 'input', 'ins',
    'isindex', 'kbd', 'label', 'legend', 'li', 'link', 'map', 'menu', 'meta', 'noframes', 'noscript',
    'object', 'ol', 'optgroup', 'option', 'p', 'param', 'pre', 'q', 's', 'samp', 'script', 'select',
    'small', 'span', 'strike', 'strong', 'style', 'sub', 'sup', 'table', 'tbody', 'td', 'textarea',
    'tfoot', 'th', 'thead', 'title', 'tr', 'tt', 'u', 'ul', 'var',
)

PHRASE_TAG_NAME_FROM_MARKER = {
    '__': 'i',
    '**': 'strong',
    '*': 'strong',
    '_': 'em',
    '??': 'cite',
    '++': 'big',
    '--': 'small',
    '-': 'del',
    '+': 'ins',
    '~': 'sub',
    '^': 'sup',
}
