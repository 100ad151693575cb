"""
Utility functions for normalizing request-supplied identifiers.
"""
import uuid

from django.core.exceptions import FieldDoesNotExist


def normalize_id(value):
    """
    Normalize a request-supplied id: trim whitespace, empty -> None.

    Example:
        >>> normalize_id('  abc ')
        'abc'
        >>> normalize_id('   ')
        >>> normalize_id(None)
    """
    if value is None:
        return None
    trimmed = str(value).strip()
    return trimmed or None


def parse_uuid(value):
    """
    Canonical string form of a UUID, or None if the value is not a UUID.

    Example:
        >>> parse_uuid(' 6F9619FF-8B86-D011-B42D-00CF4FC964FF ')
        '6f9619ff-8b86-d011-b42d-00cf4fc964ff'
        >>> parse_uuid('not-a-uuid')
    """
    if isinstance(value, uuid.UUID):
        return str(value)
    normalized = normalize_id(value)
    if normalized is None:
        return None
    try:
        return str(uuid.UUID(normalized))
    except ValueError:
        return None


def same_id(left, right):
    """Compare two ids of possibly different types (UUID / int / str). None never matches."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


def has_model_field(model, field_name):
    """
    Check if model has field using _meta (works for FK, M2M, reverse relations).

    This is more reliable than hasattr() because:
    - hasattr() returns True for descriptors that aren't actual fields
    - _meta.get_field() is the official Django API for field introspection

    Example:
        >>> has_model_field(Location, 'world')
        True
        >>> has_model_field(LocationType, 'world')
        False
    """
    try:
        model._meta.get_field(field_name)
        return True
    except FieldDoesNotExist:
        return False
