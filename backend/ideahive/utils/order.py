def renumber(blocks, position_field="position"):
    """Re-assigns sequential positions (0..N-1) following list order."""
    for index, block in enumerate(blocks):
        block[position_field] = index
    return blocks

def clamp_insert_index(position, count):
    """
    Index at which a new item lands: the requested position when it falls
    inside the list, otherwise the end.
    """
    if position is None or position >= count:
        return count
    return position

def move_item(items, from_index, to_index):
    item = items.pop(from_index)
    items.insert(to_index, item)
    return items
