from sqlalchemy import MetaData

# Deterministic constraint names keep SQLite and PostgreSQL schemas comparable.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "%(table_name)s_%(column_0_name)s_key",
    "ck": "%(table_name)s_%(constraint_name)s_check",
    "fk": "%(table_name)s_%(column_0_name)s_fkey",
    "pk": "%(table_name)s_pkey",
}

metadata_obj = MetaData(naming_convention=NAMING_CONVENTION)
