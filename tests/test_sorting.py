import pytest

from steppers import SortEvent
from steppers.sorting import BubbleSortStepper, SelectionSortStepper


def _run(stepper):
    events = []
    while not stepper.is_done():
        events.append(stepper.step())
    return events


def test_selection_sort_scenario():
    s = SelectionSortStepper([5, 3, 8, 4, 2])
    events = _run(s)
    assert s.array == [2, 3, 4, 5, 8]
    assert sum(e.kind is SortEvent.MARK_SORTED for e in events) == 4
    assert events[-1].kind is SortEvent.DONE


def test_bubble_sort_two_elements():
    s = BubbleSortStepper([2, 1])
    kinds = [e.kind for e in _run(s)]
    assert kinds == [
        SortEvent.INIT_PASS,
        SortEvent.COMPARE,
        SortEvent.SWAP,
        SortEvent.ADVANCE,
        SortEvent.MARK_SORTED,
        SortEvent.DONE,
    ]
    assert s.array == [1, 2]


@pytest.mark.parametrize("cls", [BubbleSortStepper, SelectionSortStepper])
@pytest.mark.parametrize("data", [
    [5, 1, 4, 2, 8],
    [3, 3, 1, 1, 2],
    [9, 8, 7, 6, 5, 4, 3, 2, 1],
    [1, 2, 3, 4],
    [-2, 0, -7, 11],
])
def test_sorts_and_preserves_multiset(cls, data):
    s = cls(data)
    while not s.is_done():
        s.step()
        assert sorted(s.array) == sorted(data)
    assert s.array == sorted(data)
    assert s.succeeded


def test_bubble_suffix_is_final_after_each_pass():
    data = [6, 2, 9, 1, 5, 3]
    final = sorted(data)
    s = BubbleSortStepper(data)
    marked = 0
    while not s.is_done():
        event = s.step()
        if event.kind is SortEvent.MARK_SORTED:
            marked += 1
            assert s.array[len(data) - marked:] == final[len(data) - marked:]
    assert marked == len(data) - 1


def test_selection_prefix_is_final_after_each_boundary():
    data = [6, 2, 9, 1, 5, 3]
    final = sorted(data)
    s = SelectionSortStepper(data)
    marked = 0
    while not s.is_done():
        event = s.step()
        if event.kind is SortEvent.MARK_SORTED:
            marked += 1
            assert s.array[:marked] == final[:marked]


def test_selection_skips_swap_when_minimum_in_place():
    s = SelectionSortStepper([1, 2])
    kinds = [e.kind for e in _run(s)]
    assert SortEvent.SWAP not in kinds
    assert kinds[-2:] == [SortEvent.MARK_SORTED, SortEvent.DONE]


@pytest.mark.parametrize("cls", [BubbleSortStepper, SelectionSortStepper])
@pytest.mark.parametrize("data", [[], [42]])
def test_trivial_arrays_finish_on_first_step(cls, data):
    s = cls(data)
    assert not s.is_done()
    event = s.step()
    assert event.kind is SortEvent.DONE and event.is_final
    assert s.step() is None


@pytest.mark.parametrize("cls", [BubbleSortStepper, SelectionSortStepper])
def test_step_numbers_are_consecutive(cls):
    events = _run(cls([4, 3, 2, 1]))
    assert [e.step_number for e in events] == list(range(len(events)))
    assert sum(e.is_final for e in events) == 1
