"""Tests for model metadata shared with the Alembic revisions."""

from bizbuilder.models.base import Base
from bizbuilder.models.user import User
from bizbuilder.models.website import Website


def test_index_names_match_migrations():
    assert {ix.name for ix in User.__table__.indexes} == {"ix_users_email", "ix_users_oauth_id"}
    assert "ix_websites_business_id" in {ix.name for ix in Website.__table__.indexes}


def test_every_table_is_registered():
    assert set(Base.metadata.tables) == {
        "plans",
        "users",
        "businesses",
        "websites",
        "website_styles",
        "contacts",
        "interactions",
        "activities",
    }
