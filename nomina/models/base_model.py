import logging
from uuid import uuid4, UUID
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from dateutil.parser import isoparse
from typing import Any, ClassVar, Dict, List, Optional, Type, get_type_hints

from nomina.errors import ModelValidationError, NotFound

logger = logging.getLogger(__name__)

# Fields no caller may patch; owner links are changed through move()
IMMUTABLE_FIELDS = {'entity_id', 'changed_on'}


def default_datetime():
    """
    Definition for default datetime
    """
    return datetime.now(timezone.utc)


def get_uuid_hex(_int=None):
    """
    Returns UUID in hex format. If _int is passed, it creates UUID with int base.
    """
    return uuid4().hex if _int is None else UUID(int=_int, version=4).hex


@dataclass(kw_only=True)
class BaseModel:
    """A base class for nomina records with an identifier and a change timestamp."""

    entity_id: str = field(default_factory=get_uuid_hex,
                           metadata={'field_type': 'entity_id'})
    changed_on: datetime = field(default_factory=default_datetime)

    # Name of the field linking a record to its owner, None for roots
    parent_field: ClassVar[Optional[str]] = None
    # Listings are ordered by this field
    sort_field: ClassVar[str] = 'name'
    not_found_error: ClassVar[Type[NotFound]] = NotFound

    @classmethod
    def fields(cls) -> List[str]:
        """
        Get a list of field names for this model.

        Returns:
            List[str]: A list of field names.
        """
        return [f.name for f in fields(cls)]

    @classmethod
    def kind(cls) -> str:
        return cls.__name__.lower()

    def parent_id(self) -> Optional[str]:
        if self.parent_field is None:
            return None
        return getattr(self, self.parent_field)

    def as_dict(self, convert_datetime_to_iso_string: bool = False) -> Dict[str, Any]:
        """
        Convert this model to a dictionary.

        Args:
            convert_datetime_to_iso_string (bool, optional): Whether to convert datetime to ISO strings.

        Returns:
            Dict[str, Any]: A dictionary representation of this model.
        """
        result = {}
        for name in self.fields():
            value = getattr(self, name)
            if convert_datetime_to_iso_string and isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, UUID):
                value = value.hex
            result[name] = value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseModel":
        """
        Load a model from dict, ignoring keys that are not model fields.
        """
        clean_data = {k: v for k, v in data.items() if k in cls.fields()}
        hints = get_type_hints(cls)

        for k, v in clean_data.items():
            if isinstance(v, UUID):
                clean_data[k] = v.hex
            elif isinstance(v, str) and hints.get(k) is datetime:
                try:
                    clean_data[k] = isoparse(v)
                except (ValueError, TypeError):
                    logger.info("'%s' is not a valid ISO timestamp for '%s'.", v, k)

        return cls(**clean_data)

    def copy(self, **changes) -> "BaseModel":
        return replace(self, **changes)

    def apply_patch(self, patch: Dict[str, Any], allow_parent: bool = False) -> "BaseModel":
        """
        Return a copy of this model with ``patch`` merged in.

        Unknown keys, identity fields and (unless ``allow_parent``) the owner
        link are rejected with ModelValidationError.
        """
        errors = []
        model_fields = self.fields()
        for key in patch:
            if key not in model_fields:
                errors.append(f"Unknown field '{key}' for {self.kind()}")
            elif key in IMMUTABLE_FIELDS:
                errors.append(f"Field '{key}' cannot be changed")
            elif key == self.parent_field and not allow_parent:
                errors.append(f"Field '{key}' can only be changed by moving the {self.kind()}")
        if errors:
            raise ModelValidationError(errors)
        return self.copy(**patch)

    def validate(self):
        """
        Validate all fields by calling corresponding `validate_<field_name>` methods if defined.
        Raise `ModelValidationError` if any validations fail.
        """
        errors = []
        for name in self.fields():
            validator = getattr(self, f"validate_{name}", None)
            if callable(validator):
                error = validator()
                if error:
                    errors.append(error)

        if errors:
            raise ModelValidationError(errors)

    def prepare_for_save(self):
        """
        Prepare this model for saving: ensure an id, refresh the timestamp and validate.
        """
        if not self.entity_id:
            self.entity_id = get_uuid_hex()
        self.changed_on = datetime.now(timezone.utc)
        self.validate()


def validate_required_text(value, name: str) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return f"{name} cannot be empty"
    return None
