from typing import Iterable

from sqlalchemy import inspect as sa_inspect


def find_unknown_fields(model, names: Iterable[str]) -> list[str]:
    """
    Return the names that are not mapped attributes of `model`.
    - model: the SQLAlchemy model class (not instance)
    - names: attribute names a caller wants to filter or order by
    """
    mapper = sa_inspect(model)
    # mapper.attrs includes columns and relationships; attr.key is the name callers use
    allowed = {attr.key for attr in mapper.attrs}
    return [name for name in names if name not in allowed]
