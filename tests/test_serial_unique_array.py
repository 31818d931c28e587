from cgutils.serial_unique_array import SerialUniqueArray


def test_keeps_first_occurrence_order():
    arr = SerialUniqueArray()
    for value in ["c", "a", "c", "b", "a"]:
        arr.unique_add(value)
    assert arr.unique_array() == ["c", "a", "b"]
    assert len(arr) == 3


def test_iteration_matches_array():
    arr = SerialUniqueArray()
    for value in [3, 1, 3, 2]:
        arr.unique_add(value)
    assert list(arr) == arr.unique_array()


def test_unique_array_is_a_copy():
    arr = SerialUniqueArray()
    arr.unique_add(1)
    copy = arr.unique_array()
    copy.append(99)
    assert arr.unique_array() == [1]


def test_clear_allows_readding():
    arr = SerialUniqueArray()
    arr.unique_add("x")
    arr.clear()
    assert len(arr) == 0
    assert arr.unique_array() == []
    arr.unique_add("x")
    assert arr.unique_array() == ["x"]


def test_no_duplicates_invariant():
    arr = SerialUniqueArray()
    for value in [i % 7 for i in range(100)]:
        arr.unique_add(value)
    items = arr.unique_array()
    assert len(items) == len(set(items)) == 7