from typing import TypeVar

from ticketing.domain.errors import InvalidIdError
from ticketing.domain.value_objects import Identifier

I = TypeVar("I", bound=Identifier)


def parse_id(id_type: type[I], value: str, kind: str) -> I:
    """Parse a raw identifier, mapping malformed input to InvalidIdError."""
    try:
        return id_type.from_string(value)
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError(kind) from None
