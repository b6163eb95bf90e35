"""
Core schema representation for code generation.

Decodes a lexicon document (as produced by any JSON decoder) into an
immutable tree of schema nodes that generators can walk consistently.
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class StructuralDecodeError(ValueError):
    """Raised when a document does not have the shape of a lexicon."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


# Schema nodes


@dataclass(frozen=True)
class SchemaNode:
    """Base class for every lexicon construct."""

    kind = "node"

    description: Optional[str] = None


@dataclass(frozen=True)
class BooleanType(SchemaNode):
    kind = "boolean"

    default: Optional[bool] = None
    const: Optional[bool] = None


@dataclass(frozen=True)
class IntegerType(SchemaNode):
    kind = "integer"

    minimum: Optional[int] = None
    maximum: Optional[int] = None
    enum: Optional[Tuple[int, ...]] = None
    default: Optional[int] = None
    const: Optional[int] = None


@dataclass(frozen=True)
class StringType(SchemaNode):
    kind = "string"

    format: Optional[str] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    max_graphemes: Optional[int] = None
    min_graphemes: Optional[int] = None
    known_values: Optional[Tuple[str, ...]] = None
    enum: Optional[Tuple[str, ...]] = None
    default: Optional[str] = None
    const: Optional[str] = None


@dataclass(frozen=True)
class BytesType(SchemaNode):
    kind = "bytes"

    max_length: Optional[int] = None
    min_length: Optional[int] = None


@dataclass(frozen=True)
class BlobType(SchemaNode):
    kind = "blob"

    accept: Tuple[str, ...] = ()
    max_size: Optional[int] = None


@dataclass(frozen=True)
class CidLinkType(SchemaNode):
    kind = "cid-link"


@dataclass(frozen=True)
class UnknownType(SchemaNode):
    kind = "unknown"


@dataclass(frozen=True)
class NullType(SchemaNode):
    kind = "null"


@dataclass(frozen=True)
class TokenType(SchemaNode):
    kind = "token"


@dataclass(frozen=True)
class ArrayType(SchemaNode):
    kind = "array"

    items: SchemaNode = field(default_factory=UnknownType)
    max_length: Optional[int] = None
    min_length: Optional[int] = None


@dataclass(frozen=True)
class ObjectType(SchemaNode):
    kind = "object"

    properties: Mapping[str, SchemaNode] = field(
        default_factory=lambda: MappingProxyType({})
    )
    required: Tuple[str, ...] = ()
    nullable: Tuple[str, ...] = ()

    def is_optional(self, name: str) -> bool:
        """A property is optional when it is not required or when it is nullable."""
        return name not in self.required or name in self.nullable

    def undeclared_names(self) -> List[str]:
        """Names listed in required/nullable that are not properties."""
        missing = []
        for name in self.required + self.nullable:
            if name not in self.properties and name not in missing:
                missing.append(name)
        return missing


@dataclass(frozen=True)
class ParamsType(SchemaNode):
    kind = "params"

    properties: Mapping[str, SchemaNode] = field(
        default_factory=lambda: MappingProxyType({})
    )
    required: Tuple[str, ...] = ()

    def undeclared_names(self) -> List[str]:
        return [name for name in self.required if name not in self.properties]


@dataclass(frozen=True)
class RecordType(SchemaNode):
    kind = "record"

    key: str = ""
    record: ObjectType = field(default_factory=ObjectType)


@dataclass(frozen=True)
class UnionType(SchemaNode):
    kind = "union"

    refs: Tuple[str, ...] = ()
    closed: Optional[bool] = None

    @property
    def is_closed(self) -> bool:
        return bool(self.closed)


@dataclass(frozen=True)
class RefType(SchemaNode):
    kind = "ref"

    ref: str = ""


@dataclass(frozen=True)
class ErrorVariant:
    """Named error a query, procedure or subscription may return."""

    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class InputBody:
    encoding: str
    schema: Optional[SchemaNode] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class OutputBody:
    encoding: str
    schema: Optional[SchemaNode] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class SubscriptionMessage:
    schema: SchemaNode
    description: Optional[str] = None


@dataclass(frozen=True)
class QueryType(SchemaNode):
    kind = "query"

    parameters: Optional[SchemaNode] = None
    output: Optional[OutputBody] = None
    errors: Tuple[ErrorVariant, ...] = ()


@dataclass(frozen=True)
class ProcedureType(SchemaNode):
    kind = "procedure"

    parameters: Optional[SchemaNode] = None
    input: Optional[InputBody] = None
    output: Optional[OutputBody] = None
    errors: Tuple[ErrorVariant, ...] = ()


@dataclass(frozen=True)
class SubscriptionType(SchemaNode):
    kind = "subscription"

    parameters: Optional[SchemaNode] = None
    message: Optional[SubscriptionMessage] = None
    errors: Tuple[ErrorVariant, ...] = ()


@dataclass(frozen=True)
class SchemaDocument:
    """A decoded lexicon file: metadata plus its ordered definitions."""

    lexicon: int
    id: str
    defs: Mapping[str, SchemaNode]
    revision: Optional[Union[int, str]] = None
    description: Optional[str] = None

    def get_definition(self, name: str) -> Optional[SchemaNode]:
        return self.defs.get(name)

    def definition_names(self) -> List[str]:
        return list(self.defs)


# Decoding helpers

_MISSING = object()


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _check(value: Any, expected: str, path: str) -> Any:
    """Check a JSON value against an expected shape name."""
    if expected == "integer":
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif expected == "boolean":
        ok = isinstance(value, bool)
    elif expected == "string":
        ok = isinstance(value, str)
    elif expected == "array":
        ok = isinstance(value, list)
    elif expected == "object":
        ok = isinstance(value, dict)
    elif expected == "integer|string":
        ok = isinstance(value, (int, str)) and not isinstance(value, bool)
    else:
        raise ValueError(f"Unknown expected shape: {expected}")

    if not ok:
        raise StructuralDecodeError(
            f"expected {expected}, got {_type_name(value)}", path
        )
    return value


def _get(
    data: Dict[str, Any], key: str, expected: str, path: str, default: Any = _MISSING
) -> Any:
    """Fetch and type-check a field; absent or null fields use the default."""
    value = data.get(key)
    if value is None:
        if default is _MISSING:
            raise StructuralDecodeError(f"missing required field '{key}'", path)
        return default
    return _check(value, expected, _join(path, key))


def _get_list(
    data: Dict[str, Any], key: str, item: str, path: str, default: Any = _MISSING
) -> Any:
    values = _get(data, key, "array", path, default)
    if values is None or values is default:
        return values
    item_path = _join(path, key)
    return tuple(
        _check(value, item, f"{item_path}[{index}]")
        for index, value in enumerate(values)
    )


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _decode_mapping(
    data: Dict[str, Any], key: str, path: str
) -> Mapping[str, SchemaNode]:
    """Decode an ordered name -> node mapping, keeping the source key order."""
    raw = _get(data, key, "object", path, default={})
    mapping_path = _join(path, key)
    nodes: Dict[str, SchemaNode] = {}
    for name, value in raw.items():
        nodes[name] = decode_node(value, _join(mapping_path, name))
    return MappingProxyType(nodes)


def _decode_errors(data: Dict[str, Any], path: str) -> Tuple[ErrorVariant, ...]:
    raw = _get(data, "errors", "array", path, default=[])
    errors_path = _join(path, "errors")
    errors = []
    for index, value in enumerate(raw):
        item_path = f"{errors_path}[{index}]"
        _check(value, "object", item_path)
        errors.append(
            ErrorVariant(
                name=_get(value, "name", "string", item_path),
                description=_get(value, "description", "string", item_path, None),
            )
        )
    return tuple(errors)


def _decode_optional_node(
    data: Dict[str, Any], key: str, path: str
) -> Optional[SchemaNode]:
    value = data.get(key)
    if value is None:
        return None
    return decode_node(value, _join(path, key))


def _decode_body(data: Dict[str, Any], key: str, path: str, cls):
    value = data.get(key)
    if value is None:
        return None
    body_path = _join(path, key)
    _check(value, "object", body_path)
    return cls(
        encoding=_get(value, "encoding", "string", body_path),
        schema=_decode_optional_node(value, "schema", body_path),
        description=_get(value, "description", "string", body_path, None),
    )


# Per-kind decoders. Each receives the raw mapping, its path and the description.


def _decode_boolean(data, path, description):
    return BooleanType(
        description=description,
        default=_get(data, "default", "boolean", path, None),
        const=_get(data, "const", "boolean", path, None),
    )


def _decode_integer(data, path, description):
    return IntegerType(
        description=description,
        minimum=_get(data, "minimum", "integer", path, None),
        maximum=_get(data, "maximum", "integer", path, None),
        enum=_get_list(data, "enum", "integer", path, None),
        default=_get(data, "default", "integer", path, None),
        const=_get(data, "const", "integer", path, None),
    )


def _decode_string(data, path, description):
    return StringType(
        description=description,
        format=_get(data, "format", "string", path, None),
        max_length=_get(data, "maxLength", "integer", path, None),
        min_length=_get(data, "minLength", "integer", path, None),
        max_graphemes=_get(data, "maxGraphemes", "integer", path, None),
        min_graphemes=_get(data, "minGraphemes", "integer", path, None),
        known_values=_get_list(data, "knownValues", "string", path, None),
        enum=_get_list(data, "enum", "string", path, None),
        default=_get(data, "default", "string", path, None),
        const=_get(data, "const", "string", path, None),
    )


def _decode_bytes(data, path, description):
    return BytesType(
        description=description,
        max_length=_get(data, "maxLength", "integer", path, None),
        min_length=_get(data, "minLength", "integer", path, None),
    )


def _decode_blob(data, path, description):
    return BlobType(
        description=description,
        accept=_get_list(data, "accept", "string", path, ()),
        max_size=_get(data, "maxSize", "integer", path, None),
    )


def _decode_array(data, path, description):
    if data.get("items") is None:
        raise StructuralDecodeError("missing required field 'items'", path)
    return ArrayType(
        description=description,
        items=decode_node(data["items"], _join(path, "items")),
        max_length=_get(data, "maxLength", "integer", path, None),
        min_length=_get(data, "minLength", "integer", path, None),
    )


def _decode_object(data, path, description):
    return ObjectType(
        description=description,
        properties=_decode_mapping(data, "properties", path),
        required=_get_list(data, "required", "string", path, ()),
        nullable=_get_list(data, "nullable", "string", path, ()),
    )


def _decode_params(data, path, description):
    return ParamsType(
        description=description,
        properties=_decode_mapping(data, "properties", path),
        required=_get_list(data, "required", "string", path, ()),
    )


def _decode_record(data, path, description):
    record = data.get("record")
    record_path = _join(path, "record")
    if record is None:
        raise StructuralDecodeError("missing required field 'record'", path)
    node = decode_node(record, record_path)
    if not isinstance(node, ObjectType):
        raise StructuralDecodeError(
            f"record must be an object, got '{node.kind}'", record_path
        )
    return RecordType(
        description=description,
        key=_get(data, "key", "string", path),
        record=node,
    )


def _decode_union(data, path, description):
    return UnionType(
        description=description,
        refs=_get_list(data, "refs", "string", path),
        closed=_get(data, "closed", "boolean", path, None),
    )


def _decode_ref(data, path, description):
    return RefType(description=description, ref=_get(data, "ref", "string", path))


def _decode_query(data, path, description):
    return QueryType(
        description=description,
        parameters=_decode_optional_node(data, "parameters", path),
        output=_decode_body(data, "output", path, OutputBody),
        errors=_decode_errors(data, path),
    )


def _decode_procedure(data, path, description):
    return ProcedureType(
        description=description,
        parameters=_decode_optional_node(data, "parameters", path),
        input=_decode_body(data, "input", path, InputBody),
        output=_decode_body(data, "output", path, OutputBody),
        errors=_decode_errors(data, path),
    )


def _decode_subscription(data, path, description):
    message = None
    raw_message = data.get("message")
    if raw_message is not None:
        message_path = _join(path, "message")
        _check(raw_message, "object", message_path)
        if raw_message.get("schema") is None:
            raise StructuralDecodeError("missing required field 'schema'", message_path)
        message = SubscriptionMessage(
            schema=decode_node(raw_message["schema"], _join(message_path, "schema")),
            description=_get(raw_message, "description", "string", message_path, None),
        )
    return SubscriptionType(
        description=description,
        parameters=_decode_optional_node(data, "parameters", path),
        message=message,
        errors=_decode_errors(data, path),
    )


def _decode_marker(cls):
    def decode(data, path, description):
        return cls(description=description)

    return decode


NODE_DECODERS: Dict[str, Callable[[Dict[str, Any], str, Optional[str]], SchemaNode]] = {
    "boolean": _decode_boolean,
    "integer": _decode_integer,
    "string": _decode_string,
    "bytes": _decode_bytes,
    "blob": _decode_blob,
    "cid-link": _decode_marker(CidLinkType),
    "unknown": _decode_marker(UnknownType),
    "null": _decode_marker(NullType),
    "token": _decode_marker(TokenType),
    "array": _decode_array,
    "object": _decode_object,
    "params": _decode_params,
    "record": _decode_record,
    "union": _decode_union,
    "ref": _decode_ref,
    "query": _decode_query,
    "procedure": _decode_procedure,
    "subscription": _decode_subscription,
}


def decode_node(data: Any, path: str = "") -> SchemaNode:
    """
    Decode one schema node.

    Args:
        data: Raw mapping with a "type" discriminator
        path: Dotted location of the node, used in error messages

    Returns:
        SchemaNode subclass matching the discriminator

    Raises:
        StructuralDecodeError: On an unknown discriminator or malformed payload
    """
    _check(data, "object", path)

    kind = data.get("type")
    if kind is None:
        raise StructuralDecodeError("missing 'type' discriminator", path)
    _check(kind, "string", _join(path, "type"))

    decoder = NODE_DECODERS.get(kind)
    if decoder is None:
        raise StructuralDecodeError(f"unknown type '{kind}'", path)

    description = _get(data, "description", "string", path, None)
    return decoder(data, path, description)


def decode_document(payload: Union[Dict[str, Any], str, bytes]) -> SchemaDocument:
    """
    Decode a lexicon document.

    Args:
        payload: Pre-decoded mapping, or raw JSON text

    Returns:
        SchemaDocument with definitions in source order

    Raises:
        StructuralDecodeError: If any part of the document is malformed
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StructuralDecodeError(f"invalid JSON: {e}") from e

    _check(payload, "object", "")
    if payload.get("defs") is None:
        raise StructuralDecodeError("missing required field 'defs'")

    document = SchemaDocument(
        lexicon=_get(payload, "lexicon", "integer", ""),
        id=_get(payload, "id", "string", ""),
        revision=_get(payload, "revision", "integer|string", "", None),
        description=_get(payload, "description", "string", "", None),
        defs=_decode_mapping(payload, "defs", ""),
    )

    logger.debug(
        f"Decoded lexicon {document.id} with {len(document.defs)} definitions"
    )
    return document


def iter_nodes(node: SchemaNode, path: str = ""):
    """
    Walk a node and everything nested below it.

    Yields:
        (path, node) pairs, parents before children
    """
    yield path, node

    if isinstance(node, ArrayType):
        yield from iter_nodes(node.items, _join(path, "items"))
    elif isinstance(node, (ObjectType, ParamsType)):
        for name, child in node.properties.items():
            yield from iter_nodes(child, _join(path, name))
    elif isinstance(node, RecordType):
        yield from iter_nodes(node.record, _join(path, "record"))
    elif isinstance(node, (QueryType, ProcedureType, SubscriptionType)):
        if node.parameters is not None:
            yield from iter_nodes(node.parameters, _join(path, "parameters"))
        for key in ("input", "output"):
            body = getattr(node, key, None)
            if body is not None and body.schema is not None:
                yield from iter_nodes(body.schema, _join(path, key))
        message = getattr(node, "message", None)
        if message is not None:
            yield from iter_nodes(message.schema, _join(path, "message"))
