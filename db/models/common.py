import uuid

from configs import db


def new_id() -> str:
    return str(uuid.uuid4())


def enum_column(enum_cls, name: str):
    """db.Enum storing member values (the Chinese labels) instead of names."""
    return db.Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
    )
