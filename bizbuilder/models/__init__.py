"""SQLAlchemy ORM models."""

from bizbuilder.models.base import Base
from bizbuilder.models.business import Business
from bizbuilder.models.crm import Activity, Contact, Interaction
from bizbuilder.models.plan import Plan
from bizbuilder.models.user import User
from bizbuilder.models.website import Website, WebsiteStyles

__all__ = [
    "Base", "Activity", "Business", "Contact", "Interaction", "Plan", "User",
    "Website", "WebsiteStyles",
]
