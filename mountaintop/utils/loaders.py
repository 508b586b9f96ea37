"""
Batch loaders keyed by id or foreign id.

Services call these up front instead of walking lazy relationships inside
loops, so each collection costs one query regardless of its size.
"""

from collections import defaultdict


def load_by_ids(session, model, ids):
    """Load rows of ``model`` whose primary key is in ``ids``, keyed by id"""
    ids = set(ids)
    if not ids:
        return {}
    rows = session.query(model).filter(model.id.in_(ids)).all()
    return {row.id: row for row in rows}


def load_by_foreign_key(session, model, column, keys, *criteria):
    """
    Load rows of ``model`` whose ``column`` value is in ``keys``.

    Args:
        session: SQLAlchemy session
        model: Mapped class to query
        column: Instrumented attribute holding the foreign id, e.g. Pick.game_id
        keys: Iterable of foreign ids
        *criteria: Extra filter expressions

    Returns:
        dict mapping each foreign id to the list of its rows, ordered by id
    """
    keys = set(keys)
    grouped = defaultdict(list)
    if not keys:
        return grouped

    rows = (
        session.query(model)
        .filter(column.in_(keys), *criteria)
        .order_by(model.id)
        .all()
    )
    for row in rows:
        grouped[getattr(row, column.key)].append(row)
    return grouped
