# SPDX-License-Identifier: MIT
"""Rewrite ES modules as AMD modules.

This package converts modules written with ``import`` / ``export`` into
``define()`` calls understood by AMD loaders such as RequireJS.

Example:
    >>> from amd_formatter import AMDFormatter, FormatterOptions, MemoryResolver, ModuleContainer
    >>> from amd_formatter import print_program
    >>>
    >>> container = ModuleContainer(MemoryResolver({"main.js": "export default 42;"}))
    >>> modules = container.load(["main.js"])
    >>> formatter = AMDFormatter(FormatterOptions(direct_exports=True))
    >>> print(print_program(formatter.build(modules)[0]), end="")
    define("main", [], function() {
      "use strict";
      return 42;
    });
"""

__version__ = "0.1.0"

from .config import (
    DIRECT_EXPORTS_ENV,
    NAMED_MODULES_ENV,
    ConfigError,
    FormatterOptions,
)
from .container import ModuleContainer
from .formatter import (
    EXPORT_HELPER,
    EXPORTS_OBJECT,
    AMDFormatter,
    DefaultExportError,
    DefaultExportStrategy,
    DependenciesMeta,
    FormatterError,
    MissingDeclarationError,
    ReservedNameError,
    UnsupportedExportError,
    classify_default_export,
)
from .module import (
    DeclarationList,
    DeclarationRecord,
    DuplicateBindingError,
    Module,
    ModuleLookup,
    Specifier,
    module_id_for_name,
)
from .parser import ModuleParseError, parse_module
from .printer import PrinterError, print_node, print_program
from .replacement import Replacement, ReplacementError, apply_replacements
from .resolver import FileResolver, MemoryResolver, ModuleResolutionError
from .writer import ConvertResult, WriteError, convert

__all__ = [
    # Config
    "FormatterOptions",
    "ConfigError",
    "NAMED_MODULES_ENV",
    "DIRECT_EXPORTS_ENV",
    # Formatter
    "AMDFormatter",
    "DefaultExportStrategy",
    "DependenciesMeta",
    "classify_default_export",
    "EXPORT_HELPER",
    "EXPORTS_OBJECT",
    "FormatterError",
    "DefaultExportError",
    "UnsupportedExportError",
    "MissingDeclarationError",
    "ReservedNameError",
    # Modules
    "Module",
    "ModuleLookup",
    "DeclarationList",
    "DeclarationRecord",
    "Specifier",
    "DuplicateBindingError",
    "module_id_for_name",
    "ModuleContainer",
    # Parsing and printing
    "parse_module",
    "ModuleParseError",
    "print_program",
    "print_node",
    "PrinterError",
    # Edits
    "Replacement",
    "ReplacementError",
    "apply_replacements",
    # Resolution
    "FileResolver",
    "MemoryResolver",
    "ModuleResolutionError",
    # Conversion
    "convert",
    "ConvertResult",
    "WriteError",
]
