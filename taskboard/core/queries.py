"""
SQL statements issued by the task endpoints
"""

from typing import Any, Dict, Mapping, Tuple

SELECT_ALL_TASKS = "SELECT * FROM tasks ORDER BY created_at DESC"

SELECT_TASK_BY_ID = "SELECT * FROM tasks WHERE id = :id"

INSERT_TASK = (
    "INSERT INTO tasks (title, description, status, priority) "
    "VALUES (:title, :description, 'TODO', :priority)"
)

DELETE_TASK = "DELETE FROM tasks WHERE id = :id"

UPDATE_TASK_STATUS = "UPDATE tasks SET status = :status WHERE id = :id"

# Column order of generated SET clauses
UPDATABLE_FIELDS = ("title", "description", "status", "priority")


def build_update(task_id: int, fields: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Build an UPDATE for the supplied subset of UPDATABLE_FIELDS.

    Keys outside UPDATABLE_FIELDS are ignored. Presence of a key is what
    counts, so an explicit None is written as NULL.
    Raises ValueError when no updatable field is supplied.
    """
    assignments = []
    params: Dict[str, Any] = {}

    for name in UPDATABLE_FIELDS:
        if name in fields:
            assignments.append(f"{name} = :{name}")
            params[name] = fields[name]

    if not assignments:
        raise ValueError("No fields to update")

    params["id"] = task_id
    sql = f"UPDATE tasks SET {', '.join(assignments)} WHERE id = :id"
    return sql, params
