"""
Flatten - преобразование вложенных документов в плоский вид и обратно.

Ключи соединяются через ".". Списки обходятся как словари с
индексами в качестве сегментов. Пустой словарь остаётся листом,
чтобы unflatten(flatten(doc)) == doc.
"""

from typing import Any, Dict, List

SEPARATOR = "."


def is_mapping(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _items(value):
    if isinstance(value, list):
        return ((str(i), v) for i, v in enumerate(value))
    return value.items()


def join_keypath(parent: str, key: str) -> str:
    return f"{parent}{SEPARATOR}{key}" if parent else key


def split_keypath(keypath: str) -> List[str]:
    return keypath.split(SEPARATOR)


def get_keyname(keypath: str) -> str:
    """Последний сегмент пути: "a.b.c" -> "c"."""
    return keypath.rsplit(SEPARATOR, 1)[-1]


def flatten(value: Dict[str, Any], parent_key: str = "") -> Dict[str, Any]:
    """Преобразовать вложенный dict в плоский с dot-notation ключами"""
    items: Dict[str, Any] = {}
    for key, child in _items(value):
        new_key = join_keypath(parent_key, key)
        if is_mapping(child) and child:
            items.update(flatten(child, new_key))
        else:
            items[new_key] = child
    return items


def unflatten(flat: Dict[str, Any]) -> Dict[str, Any]:
    """Обратное преобразование: {"a.b": 1} -> {"a": {"b": 1}}"""
    result: Dict[str, Any] = {}
    for keypath, value in flat.items():
        set_by_path(result, keypath, value)
    return result


def set_by_path(document: Dict[str, Any], keypath: str, value: Any) -> Dict[str, Any]:
    """
    Устанавливает значение по пути, создавая промежуточные группы.

    Соседние ключи не затрагиваются. Если на пути встречается скаляр
    или список, а следующий сегмент не индекс, он заменяется группой.
    Возвращает тот же document.
    """
    keys = split_keypath(keypath)
    node: Any = document
    for key, next_key in zip(keys, keys[1:]):
        child = _get_child(node, key)
        if isinstance(child, list) and not next_key.isdigit():
            child = None
        if not is_mapping(child):
            child = {}
            _set_child(node, key, child)
        node = child
    _set_child(node, keys[-1], value)
    return document


def get_by_path(document: Dict[str, Any], keypath: str, default: Any = None) -> Any:
    node: Any = document
    for key in split_keypath(keypath):
        if not is_mapping(node):
            return default
        node = _get_child(node, key, default)
    return node


def _get_child(node, key: str, default: Any = None) -> Any:
    if isinstance(node, list):
        if key.isdigit() and int(key) < len(node):
            return node[int(key)]
        return default
    return node.get(key, default)


def _set_child(node, key: str, value: Any) -> None:
    if isinstance(node, list) and key.isdigit():
        index = int(key)
        if index < len(node):
            node[index] = value
            return
        # дополняем список до нужного индекса
        node.extend([None] * (index - len(node)))
        node.append(value)
        return
    node[key] = value
