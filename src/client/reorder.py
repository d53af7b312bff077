"""List reordering for drag-and-drop style moves."""


def move(ids: list[str], src: int, dest: int) -> list[str]:
    """Return ids with the item at src dropped onto the item at dest.

    Moving down places the item after the target, moving up places it
    before; in both cases it ends up at index dest.
    """
    if src == dest:
        return list(ids)
    if not (0 <= src < len(ids) and 0 <= dest < len(ids)):
        raise IndexError(f"Cannot move {src + 1} to {dest + 1}: list has {len(ids)} tasks")

    reordered = list(ids)
    reordered.insert(dest, reordered.pop(src))
    return reordered


def renumber(ids: list[str]) -> list[tuple[str, int]]:
    """Assign 1-based orders by visual position."""
    return [(task_id, index + 1) for index, task_id in enumerate(ids)]
