"""bizbuilder — website builder, CRM and accounts backend."""

__version__ = "0.1.0"
