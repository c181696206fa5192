import pytest

from PySide6.QtGui import QImage

from pixedit.editor.history import HistoryStack


def snap(value: int) -> QImage:
    img = QImage(4, 4, QImage.Format.Format_ARGB32)
    img.fill(0xFF000000 | value)
    return img


def shown(stack: HistoryStack) -> int:
    return stack.current.image.pixel(0, 0) & 0xFFFFFF


def test_empty_stack_has_nothing_to_undo_or_redo() -> None:
    stack = HistoryStack(5)
    assert stack.current_index == -1
    assert stack.current is None
    assert stack.undo() is None
    assert stack.redo() is None


def test_reset_makes_single_entry() -> None:
    stack = HistoryStack(5)
    stack.commit(snap(1))
    stack.commit(snap(2))
    stack.reset(snap(9))
    assert len(stack) == 1
    assert stack.current_index == 0
    assert not stack.can_undo
    assert shown(stack) == 9


def test_undo_then_redo_restores_every_commit() -> None:
    stack = HistoryStack(50)
    stack.reset(snap(0))
    for i in range(1, 8):
        stack.commit(snap(i))

    for _ in range(7):
        assert stack.undo() is not None
    assert shown(stack) == 0
    assert not stack.can_undo

    for _ in range(7):
        assert stack.redo() is not None
    assert shown(stack) == 7
    assert not stack.can_redo


def test_commit_after_undo_drops_redo_branch() -> None:
    stack = HistoryStack(10)
    stack.reset(snap(0))
    stack.commit(snap(1))
    stack.commit(snap(2))

    stack.undo()
    stack.undo()
    stack.commit(snap(5))

    assert len(stack) == 2
    assert not stack.can_redo
    assert shown(stack) == 5
    assert stack.undo() is not None
    assert shown(stack) == 0


def test_capacity_evicts_oldest_entries() -> None:
    max_size = 50
    stack = HistoryStack(max_size)
    stack.reset(snap(0))
    for i in range(1, max_size + 6):
        stack.commit(snap(i))

    assert len(stack) == max_size
    assert stack.current_index == max_size - 1
    assert shown(stack) == max_size + 5

    undone = 0
    while stack.undo() is not None:
        undone += 1
    assert undone == max_size - 1
    # The first six snapshots were evicted
    assert shown(stack) == 6


def test_ordinals_keep_increasing_through_eviction() -> None:
    stack = HistoryStack(3)
    for i in range(5):
        stack.commit(snap(i))
    assert [e.ordinal for e in stack.entries()] == [2, 3, 4]


def test_commit_stores_a_copy() -> None:
    stack = HistoryStack(3)
    img = snap(1)
    stack.commit(img)
    img.fill(0xFF00FF00)
    assert shown(stack) == 1


def test_invalid_capacity_rejected() -> None:
    with pytest.raises(ValueError):
        HistoryStack(0)
