"""
Derivation Path Schemas and Paths

A schema is a typed template for derivation paths:

    m / application: any / purpose: any / context: any / index: num

Segments are separated by " / ". The first segment is the root marker "m";
every other segment is "label: type" with type one of:

- num: a base-10 integer in 0..2^31-1
- str: any text, hashed to an index with str_to_index
- any: digits are read as num, anything else as str

A path is checked against a schema position by position:

    m/42/0/1/0

Paths may be shorter than their schema (a shallower node), never longer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from ..config import (
    INDEX_MODULUS,
    MAX_SCHEMA_SEGMENTS,
    PATH_DELIMITER,
    ROOT,
    SCHEMA_DELIMITER,
    TYPE_DELIMITER,
)
from ..exceptions import HDError, HDGrammarError, HDRangeError, HDTypeError
from .codec import check_index, decode_int
from .hashes import HashAdapter


class SegmentType(str, Enum):
    STR = "str"
    NUM = "num"
    ANY = "any"


@dataclass(frozen=True)
class SchemaSegment:
    label: str
    type: SegmentType


PathSchema = Tuple[SchemaSegment, ...]
DerivationPath = Tuple[int, ...]


def parse_schema(text: str) -> PathSchema:
    """
    Parse and validate a derivation path schema.

    Args:
        text: Schema text, e.g. "m / application: any / index: num"

    Returns:
        Tuple of SchemaSegment, one per position after the root

    Raises:
        HDRangeError: If the schema has more than 256 segments including the root
        HDGrammarError: If the root is not "m" or a segment is malformed
        HDTypeError: If a segment type is not str, num or any
    """
    segments = text.split(SCHEMA_DELIMITER)
    if len(segments) > MAX_SCHEMA_SEGMENTS:
        raise HDRangeError(
            f"Derivation path schema cannot exceed {MAX_SCHEMA_SEGMENTS} segments, "
            f"got {len(segments)}",
            value=len(segments),
        )
    if segments[0] != ROOT:
        raise HDGrammarError(
            f'Root segment must be designated by "{ROOT}", got "{segments[0]}"',
            value=segments[0],
        )

    result: List[SchemaSegment] = []
    for position, segment in enumerate(segments[1:]):
        label, sep, type_name = segment.partition(TYPE_DELIMITER)
        label = label.strip()
        type_name = type_name.strip()
        if not sep or not label or not type_name:
            raise HDGrammarError(
                f'Invalid segment "{segment}", expected "label: type"',
                position=position,
                value=segment,
            )
        try:
            segment_type = SegmentType(type_name)
        except ValueError:
            raise HDTypeError(
                f'Invalid type "{type_name}" for label "{label}", '
                f"expected one of {[t.value for t in SegmentType]}",
                position=position,
                label=label,
                value=type_name,
            ) from None
        result.append(SchemaSegment(label, segment_type))

    return tuple(result)


def format_schema(schema: PathSchema) -> str:
    """Render a parsed schema back to its text form."""
    parts = [ROOT] + [f"{s.label}: {s.type.value}" for s in schema]
    return SCHEMA_DELIMITER.join(parts)


def str_to_index(h: HashAdapter, text: str) -> int:
    """
    Map a label string to an index.

    The first 4 bytes of the UTF-8 text's digest are read big-endian and
    reduced mod 2^31. This mapping is part of the derivation contract: the
    same text under the same adapter always yields the same index.

    Raises:
        HDGrammarError: If text is empty
    """
    if not text:
        raise HDGrammarError("String index cannot be empty", value=text)
    return decode_int(h.digest(text.encode("utf-8"))) % INDEX_MODULUS


def _is_decimal(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _num_index(text: str) -> int:
    if not _is_decimal(text):
        raise HDTypeError(f'Invalid numeric index "{text}"', value=text)
    return check_index(int(text))


def get_index(h: HashAdapter, text: str, segment_type: SegmentType) -> int:
    """
    Resolve a path segment to an index according to its schema type.

    Raises:
        HDGrammarError: If the segment is empty
        HDTypeError: If the type is unknown or a num segment is not a decimal integer
        HDRangeError: If a numeric index is outside 0..2^31-1
    """
    try:
        segment_type = SegmentType(segment_type)
    except ValueError:
        raise HDTypeError(
            f'Type "{segment_type}" invalid for index', value=segment_type
        ) from None
    if not text:
        raise HDGrammarError("Empty path segment", value=text)

    if segment_type is SegmentType.NUM:
        return _num_index(text)
    if segment_type is SegmentType.STR:
        return str_to_index(h, text)

    # any: numbers first, then strings
    if _is_decimal(text):
        return _num_index(text)
    try:
        return str_to_index(h, text)
    except HDError as e:
        raise HDGrammarError(f'Invalid index "{text}": {e.message}', value=text) from e


def parse_path(h: HashAdapter, text: str, schema: PathSchema) -> DerivationPath:
    """
    Parse a derivation path against a schema.

    Args:
        h: Hash adapter used to hash string segments
        text: Path text, e.g. "m/42/0/1/0"
        schema: Parsed schema the path must follow

    Returns:
        Tuple of indices, one per path segment after the root

    Raises:
        HDGrammarError: If the root is not "m" or a segment is empty
        HDRangeError: If the path is longer than the schema or an index is out of range
        HDTypeError: If a segment does not match its schema type
    """
    root, *segments = text.split(PATH_DELIMITER)
    if root != ROOT:
        raise HDGrammarError(
            f'Master key must be designated by "{ROOT}", got "{root}"',
            value=root,
        )
    if len(segments) > len(schema):
        raise HDRangeError(
            f"Too many indices: got {len(segments)}, schema allows {len(schema)}",
            value=len(segments),
        )

    result: List[int] = []
    for position, segment in enumerate(segments):
        entry = schema[position]
        try:
            index = get_index(h, segment, entry.type)
        except HDError as e:
            raise e.at(position, entry.label, segment) from e
        result.append(index)

    return tuple(result)


def format_path(path: DerivationPath) -> str:
    """Render indices as path text, e.g. (42, 0) -> "m/42/0"."""
    return PATH_DELIMITER.join([ROOT] + [str(i) for i in path])
