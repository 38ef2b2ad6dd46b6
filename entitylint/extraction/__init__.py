"""Mapping metadata extraction: masking lexer, attribute scanner and class extractor."""

from .extractor import extract_class
from .lexer import Docblock, MaskedSource, mask_source
from .scanner import (
    AttributeGroup,
    column_type_name,
    find_attribute_groups,
    find_closing,
    parse_annotations,
    parse_arguments,
    parse_attribute,
    parse_attribute_group,
    parse_literal,
    split_arguments,
)

__all__ = [
    "AttributeGroup",
    "Docblock",
    "MaskedSource",
    "column_type_name",
    "extract_class",
    "find_attribute_groups",
    "find_closing",
    "mask_source",
    "parse_annotations",
    "parse_arguments",
    "parse_attribute",
    "parse_attribute_group",
    "parse_literal",
    "split_arguments",
]
