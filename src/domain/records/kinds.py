"""Record kinds known to the FoodBridge record layer."""

from enum import Enum


class RecordKind(Enum):
    """Named schemas a candidate record can be validated against."""

    CONTACT = "contact"
    """Message left through the public contact form."""

    POST = "post"
    """Food offered by a donor."""

    REQUEST = "request"
    """A beneficiary's claim on a donor's post."""

    USER = "user"
    """Registered donor or beneficiary account."""
