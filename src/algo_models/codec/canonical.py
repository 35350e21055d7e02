"""
Field omission and typed wire models.

Maps typed pydantic models onto raw value maps keyed by their wire names
(field aliases). A field holding its type's zero value is left out of the
map entirely; an absent key decodes to that zero value.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, model_validator

from ..constants import MAX_UINT64, PUBLIC_KEY_LENGTH
from ..runtime.address import Address
from ..runtime.errors import (
    InvalidDigestLengthError,
    MalformedAddressError,
    MissingFieldError,
    UnsupportedTagError,
)


@dataclass(frozen=True)
class FixedSize:
    """Annotation marker for byte fields of exactly ``size`` bytes."""

    size: int


Uint64 = Annotated[StrictInt, Field(ge=0, le=MAX_UINT64)]
Uint32 = Annotated[StrictInt, Field(ge=0, le=2 ** 32 - 1)]
Uint8 = Annotated[StrictInt, Field(ge=0, le=255)]


def is_zero_value(value: Any, fixed_size: bool = False) -> bool:
    """
    Check whether a value is its type's zero value.

    Args:
        value: Typed or raw value
        fixed_size: Treat all-zero bytes as zero (fixed-size digests and keys)

    Returns:
        True if the value must be omitted from an encoded map
    """
    if value is None:
        return True
    if isinstance(value, Address):
        return value.is_zero()
    if isinstance(value, WireModel):
        return not value.to_raw()
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return not value
    if isinstance(value, int):
        return value == 0
    if isinstance(value, (bytes, bytearray)):
        return len(value) == 0 or (fixed_size and not any(value))
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def to_raw_value(value: Any) -> Any:
    """Convert a typed value into its raw wire representation."""
    if isinstance(value, WireModel):
        return value.to_raw()
    if isinstance(value, Address):
        return value.public_key
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_raw_value(item) for item in value]
    if isinstance(value, dict):
        return {key: to_raw_value(item) for key, item in value.items()}
    return value


def omit_zero_values(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop every entry whose value is a zero value."""
    return {key: value for key, value in mapping.items() if not is_zero_value(value)}


def _fixed_size(field_info: Any) -> Optional[int]:
    for marker in field_info.metadata:
        if isinstance(marker, FixedSize):
            return marker.size
    return None


def _address_shape(field_info: Any) -> Optional[str]:
    """Return "single" or "sequence" for address-typed fields, None otherwise."""
    annotation = field_info.annotation
    if annotation is Address:
        return "single"
    args = get_args(annotation)
    if get_origin(annotation) is tuple:
        return "sequence" if Address in args else None
    if Address in args:
        return "single"
    return None


def _is_zero_placeholder(value: Any, field_info: Any) -> bool:
    if isinstance(value, Address):
        return value.is_zero()
    if not isinstance(value, (bytes, bytearray)) or any(value):
        return False
    size = _fixed_size(field_info)
    if size is None and _address_shape(field_info) == "single":
        size = PUBLIC_KEY_LENGTH
    return size is not None and len(value) == size


class WireModel(BaseModel):
    """
    Immutable model with a canonical map representation.

    Subclasses declare wire keys as field aliases, list maps that decode into
    other wire models in ``nested_fields`` and keys that must be present in
    ``required_fields``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    nested_fields: ClassVar[Dict[str, Type["WireModel"]]] = {}
    required_fields: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def wire_keys(cls) -> Dict[str, str]:
        """Map of wire key to field name."""
        return {(info.alias or name): name for name, info in cls.model_fields.items()}

    @model_validator(mode="before")
    @classmethod
    def normalize_zero_values(cls, data: Any) -> Any:
        """
        Store all-zero digests and zero addresses of optional fields as None.

        Such values are omitted on encode and decode back as None, so every
        optional field has a single in-memory form for its zero value.
        """
        if not isinstance(data, dict):
            return data
        normalized = dict(data)
        for name, info in cls.model_fields.items():
            if info.default is not None:
                continue
            for key in {info.alias or name, name}:
                if key in normalized and _is_zero_placeholder(normalized[key], info):
                    normalized[key] = None
        return normalized

    @model_validator(mode="after")
    def check_wire_constraints(self) -> "WireModel":
        fields = type(self).model_fields
        for name, info in fields.items():
            size = _fixed_size(info)
            value = getattr(self, name)
            if size is not None and value is not None and len(value) != size:
                raise InvalidDigestLengthError(info.alias or name, size, len(value))

        keys = type(self).wire_keys()
        for key in type(self).required_fields:
            name = keys[key]
            if is_zero_value(getattr(self, name), _fixed_size(fields[name]) is not None):
                raise MissingFieldError(key, type(self).__name__)
        return self

    def to_raw(self) -> Dict[str, Any]:
        """
        Convert to a raw map with zero-valued fields omitted.

        Returns:
            Dictionary keyed by wire names
        """
        raw = {}
        for name, info in type(self).model_fields.items():
            value = getattr(self, name)
            if is_zero_value(value, _fixed_size(info) is not None):
                continue
            raw[info.alias or name] = to_raw_value(value)
        return raw

    @classmethod
    def check_required(cls, raw: Mapping[Any, Any], context: str) -> None:
        """
        Check that every required wire key is present.

        Raises:
            MissingFieldError: For the first absent key
        """
        for key in cls.required_fields:
            if key not in raw:
                raise MissingFieldError(key, context)

    @classmethod
    def check_address_encoding(cls, key: Any, value: Any, context: str) -> None:
        """
        Require address fields to arrive as byte strings.

        Address text is accepted when building models in Python, but never
        from the wire, where an address is always its raw public key.

        Raises:
            MalformedAddressError: If an address value is not bytes
        """
        name = cls.wire_keys().get(key)
        if name is None:
            return
        shape = _address_shape(cls.model_fields[name])
        if shape == "single":
            items = [value]
        elif shape == "sequence" and isinstance(value, list):
            items = value
        else:
            return
        for item in items:
            if not isinstance(item, bytes):
                raise MalformedAddressError(
                    f"Address field '{key}' of {context} must be a byte string, got {type(item).__name__}",
                    {"context": context, "field": key, "type": type(item).__name__},
                )

    @classmethod
    def collect_fields(cls, raw: Any, context: str) -> Dict[str, Any]:
        """
        Validate the shape of a raw map and decode nested wire models.

        Args:
            raw: Raw map
            context: Name used in error details

        Returns:
            Values keyed by wire name, ready for ``model_validate``
        """
        if not isinstance(raw, dict):
            raise UnsupportedTagError(
                f"{context} must be a map, got {type(raw).__name__}",
                {"context": context, "type": type(raw).__name__},
            )
        keys = cls.wire_keys()
        unknown = sorted(str(key) for key in raw if key not in keys)
        if unknown:
            raise UnsupportedTagError(
                f"Unrecognized field(s) in {context}: {', '.join(unknown)}",
                {"context": context, "fields": unknown},
            )
        cls.check_required(raw, context)

        values = {}
        for key, value in raw.items():
            cls.check_address_encoding(key, value, context)
            nested = cls.nested_fields.get(key)
            if nested is not None:
                if isinstance(value, list):
                    value = [nested.from_raw(item, f"{context}.{key}[{i}]") for i, item in enumerate(value)]
                else:
                    value = nested.from_raw(value, f"{context}.{key}")
            values[key] = value
        return values

    @classmethod
    def build(cls, values: Dict[str, Any], context: str):
        """Validate collected values, reporting wrong wire types as unsupported tags."""
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise UnsupportedTagError(
                f"Field(s) of {context} have unsupported wire types",
                {"context": context, "errors": errors},
                cause=e,
            )

    @classmethod
    def from_raw(cls, raw: Any, context: Optional[str] = None):
        """
        Build a model from a raw map; absent keys take their zero value.

        Args:
            raw: Raw map keyed by wire names
            context: Name used in error details, defaults to the class name

        Returns:
            Model instance
        """
        context = context or cls.__name__
        return cls.build(cls.collect_fields(raw, context), context)


__all__ = [
    "FixedSize",
    "Uint64",
    "Uint32",
    "Uint8",
    "WireModel",
    "is_zero_value",
    "omit_zero_values",
    "to_raw_value",
]
