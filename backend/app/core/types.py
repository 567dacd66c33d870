"""Column types shared by the ICMS models (PostgreSQL in production, SQLite in tests)"""
from sqlalchemy import TypeDecorator, String
import uuid


def generate_uuid() -> str:
    """New primary key value"""
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """UUID stored as VARCHAR(36); values always come back as str"""
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(str(value))) if _looks_like_uuid(value) else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else str(value)


def _looks_like_uuid(value) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
