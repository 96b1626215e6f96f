"""ORM models. Importing this package registers every table on Base.metadata."""

from marketplace.models.user import User
from marketplace.models.listing import Listing
from marketplace.models.message import Message

__all__ = ["User", "Listing", "Message"]
