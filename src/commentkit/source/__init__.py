"""Source units, symbol binding and the JSDoc declaration tree."""

from commentkit.source.jsdoc import (
    JSDocBlock,
    JSDocCallbackTag,
    JSDocEnumTag,
    JSDocParameterTag,
    JSDocPropertyTag,
    JSDocTag,
    JSDocTemplateTag,
    JSDocTypedefTag,
    build_jsdoc_block,
    collect_jsdoc_blocks,
    is_sub_entity,
)
from commentkit.source.symbols import Declaration, Symbol, bind_unit
from commentkit.source.unit import SourceUnit, language_for_path

__all__ = [
    "Declaration",
    "JSDocBlock",
    "JSDocCallbackTag",
    "JSDocEnumTag",
    "JSDocParameterTag",
    "JSDocPropertyTag",
    "JSDocTag",
    "JSDocTemplateTag",
    "JSDocTypedefTag",
    "SourceUnit",
    "Symbol",
    "bind_unit",
    "build_jsdoc_block",
    "collect_jsdoc_blocks",
    "is_sub_entity",
    "language_for_path",
]
