"""
# Xilize: scopes.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Scope chain: keys, URL abbreviations, signatures, catalogs and diagnostics.
"""

from typing import Optional

from xilize.catalogs import Catalog, CatalogEntry, CatalogListener
from xilize.constants import SOURCE_DESCRIPTION_FOR_STRINGS
from xilize.evaluators import PythonEvaluator, ScriptEvaluator
from xilize.exceptions import SignatureOverrideException, XilizeException
from xilize.reporting import Reporter
from xilize.utilities import is_true_value


class Environment:
    """
    State shared by every scope of a run: the reporter, the script evaluator, and the halt flag.

    The evaluator (and hence its namespace) lasts for the whole run,
    so that functions defined by one macro are available to later ones.
    `halt()` may be called from another thread;
    the flag is checked once per document, before any work is done.
    """
    _reporter: Reporter
    _evaluator: Optional[ScriptEvaluator]
    _is_halted: bool

    def __init__(self, reporter: Optional[Reporter] = None, evaluator: Optional[ScriptEvaluator] = None):
        self._reporter = Reporter() if reporter is None else reporter
        self._evaluator = evaluator
        self._is_halted = False

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    @property
    def is_halted(self) -> bool:
        return self._is_halted

    def halt(self):
        self._is_halted = True

    def reset(self):
        self._is_halted = False
        self._reporter.reset_counts()

    @property
    def evaluator(self) -> ScriptEvaluator:
        if self._evaluator is None:
            self._evaluator = PythonEvaluator()

        return self._evaluator


class Scope:
    """
    Node of the scope chain.

    A key whose local value is the empty string counts as undefined,
    and hides any value further up the chain.
    Writes are always local.
    """
    _parent: Optional['Scope']
    _environment: Environment
    _source: str
    _value_from_key: dict[str, str]
    _url_from_abbreviation: dict[str, str]
    _signature_from_name: dict[str, object]
    _custom_source_from_name: dict[str, str]
    _catalog: Optional[Catalog]

    def __init__(
        self,
        parent: Optional['Scope'] = None,
        environment: Optional[Environment] = None,
        source: str = SOURCE_DESCRIPTION_FOR_STRINGS,
    ):
        self._parent = parent
        if environment is None:
            environment = Environment() if parent is None else parent.environment
        self._environment = environment
        self._source = source
        self._value_from_key = {}
        self._url_from_abbreviation = {}
        self._signature_from_name = {}
        self._custom_source_from_name = {}
        self._catalog = None

    @property
    def parent(self) -> Optional['Scope']:
        return self._parent

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def reporter(self) -> Reporter:
        return self._environment.reporter

    @property
    def source(self) -> str:
        return self._source

    @property
    def evaluator(self) -> ScriptEvaluator:
        return self._environment.evaluator

    ################################
    # Keys
    ################################

    def value(self, key: str) -> str:
        if key in self._value_from_key:
            return self._value_from_key[key]

        if self._parent is None:
            return ''

        return self._parent.value(key)

    def is_defined(self, key: str) -> bool:
        return self.value(key) != ''

    def is_value_true(self, key: str) -> bool:
        return is_true_value(self.value(key))

    def define(self, key: str, value: str):
        self._value_from_key[key] = value

    def define_all(self, value_from_key: dict[str, str]):
        self._value_from_key.update(value_from_key)

    def define_append(self, key: str, value: str):
        self.define(key, self.value(key) + value)

    def define_default(self, key: str, value: str):
        if not self.is_defined(key):
            self.define(key, value)

    def undefine(self, key: str):
        if key == '':
            return

        self._value_from_key[key] = ''

    ################################
    # URL abbreviations
    ################################

    def add_abbreviation(self, abbreviation: str, url: str):
        self._url_from_abbreviation[abbreviation] = url

    def lookup_url(self, abbreviation: str) -> Optional[str]:
        if abbreviation in self._url_from_abbreviation:
            return self._url_from_abbreviation[abbreviation]

        if self._parent is None:
            return None

        return self._parent.lookup_url(abbreviation)

    ################################
    # Signatures
    ################################

    def register_signature(self, signature, is_custom: bool = False, line_number: Optional[int] = None):
        """
        Register a signature template under its name.

        Overriding a visible signature with a custom one warns (when `_WarnOnSigOverride_` is true);
        overriding one with a native signature is a programming error.
        """
        name = signature.name
        existing_signature = self.lookup_signature(name)
        if existing_signature is not None:
            if not is_custom:
                raise SignatureOverrideException(name)

            if self.is_value_true('_WarnOnSigOverride_'):
                existing_source = self._lookup_custom_source(name)
                if existing_source is None:
                    self.warning(f'signature override: {name} is also native signature', line_number)
                else:
                    self.warning(f'signature override: {name} is also defined in {existing_source}', line_number)

        self._signature_from_name[name] = signature
        if is_custom:
            self._custom_source_from_name[name] = self._source
        else:
            self._custom_source_from_name.pop(name, None)

    def lookup_signature(self, name: str):
        if name in self._signature_from_name:
            return self._signature_from_name[name]

        if self._parent is None:
            return None

        return self._parent.lookup_signature(name)

    def _lookup_custom_source(self, name: str) -> Optional[str]:
        if name in self._signature_from_name:
            return self._custom_source_from_name.get(name)

        if self._parent is None:
            return None

        return self._parent._lookup_custom_source(name)

    def get_signature(self, name: str, modifier_text: str = ''):
        """
        Get a fresh instance of the signature `name`, configured with the given modifiers.

        An unknown name falls back to the unsigned-block signature.
        """
        signature = self.lookup_signature(name)
        if signature is None:
            signature = self.lookup_signature(self.value('_UnsignedBlockSigName_'))
        if signature is None:
            raise XilizeException(f'signature `{name}` not found, and no unsigned-block signature is available')

        return signature.instantiate(modifier_text)

    def signature_names(self) -> list[str]:
        names = set(self._signature_from_name)
        if self._parent is not None:
            names.update(self._parent.signature_names())

        return sorted(names)

    ################################
    # Catalog
    ################################

    @property
    def catalog(self) -> Optional[Catalog]:
        if self._catalog is not None:
            return self._catalog

        if self._parent is None:
            return None

        return self._parent.catalog

    @catalog.setter
    def catalog(self, value: Catalog):
        self._catalog = value

    def add_catalog_listener(self, listener: CatalogListener):
        catalog = self.catalog
        if catalog is not None:
            catalog.add_listener(listener)

    def has_catalog_listener(self, entry: CatalogEntry) -> bool:
        catalog = self.catalog
        if catalog is None:
            return False

        return catalog.has_listener(entry)

    def register_catalog_entry(self, entry: CatalogEntry):
        catalog = self.catalog
        if catalog is not None:
            catalog.register(entry)

    def unique_id(self) -> str:
        catalog = self.catalog
        if catalog is None:
            return ''

        return catalog.unique_id()

    ################################
    # Diagnostics
    ################################

    def report(self, message: str, line_number: Optional[int] = None):
        if self.is_value_true('_Silent_'):
            return

        self.reporter.report(message, self._source, line_number)

    def warning(self, message: str, line_number: Optional[int] = None):
        if self.is_value_true('_NoWarn_'):
            return

        self.reporter.warning(message, self._source, line_number)

    def error(self, message: str, line_number: Optional[int] = None):
        self.reporter.error(message, self._source, line_number)

    def debug(self, message: str, line_number: Optional[int] = None):
        if not self.is_value_true('_Debug_'):
            return

        self.reporter.debug(message, self._source, line_number)
