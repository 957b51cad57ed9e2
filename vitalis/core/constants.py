"""Domain constants: the closed set of blood groups."""
from enum import Enum
from typing import Optional

from vitalis.utils.errors import InvalidBloodGroupError


class BloodGroup(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


def parse_blood_group(value: Optional[str]) -> Optional[BloodGroup]:
    """Map a stored or user-supplied code to a :class:`BloodGroup`.

    ``None`` and the empty string mean no blood group was recorded. Any other
    value must match one of the eight codes exactly, ignoring case, or
    :class:`InvalidBloodGroupError` is raised.
    """
    if value is None or value == "":
        return None
    if isinstance(value, BloodGroup):
        return value
    if not isinstance(value, str):
        raise InvalidBloodGroupError(f"Invalid blood group: {value!r}")
    for group in BloodGroup:
        if group.value.lower() == value.lower():
            return group
    raise InvalidBloodGroupError(f"Invalid blood group: {value}")
