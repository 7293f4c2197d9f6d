"""Shared serialization utilities for stores and durable state."""

from dataclasses import fields, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from sacco_portal.models.identity import CredentialEntry, Identity


def to_dict(obj: Any) -> dict:
    """Convert a flat dataclass or mapping to a JSON-ready dictionary."""
    if is_dataclass(obj):
        return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, dict):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, (datetime, date, time)):
        return value.isoformat()
    elif is_dataclass(value):
        return to_dict(value)
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def identity_from_dict(data: dict[str, Any]) -> Identity:
    """Rebuild an Identity from its serialized form."""
    return Identity(
        id=data["id"],
        email=data.get("email") or "",
        first_name=data.get("first_name") or "",
        last_name=data.get("last_name") or "",
        phone=data.get("phone"),
        national_id=data.get("national_id"),
        occupation=data.get("occupation"),
        member_id=data.get("member_id"),
    )


def credential_to_dict(entry: CredentialEntry) -> dict[str, Any]:
    """Serialize a credential entry for durable storage."""
    return {
        "email": entry.email,
        "password_hash": entry.password_hash,
        "identity": to_dict(entry.identity),
    }


def credential_from_dict(data: dict[str, Any]) -> CredentialEntry:
    """Rebuild a credential entry from durable storage."""
    return CredentialEntry(
        email=data["email"],
        password_hash=data["password_hash"],
        identity=identity_from_dict(data["identity"]),
    )
