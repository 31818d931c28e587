from cgutils.rand import UNKNOWN, generate, generate_matrix, generate_session


def test_generate_length_and_bounds():
    values = generate(16, 0.0, 1.0)
    assert len(values) == 16
    assert all(0.0 <= v <= 1.0 for v in values)


def test_generate_zero_dim_is_empty():
    assert generate(0, 0.0, 1.0) == []


def test_generate_fixed_seed_is_reproducible():
    first = generate(10, -5.0, 5.0, seed=42)
    second = generate(10, -5.0, 5.0, seed=42)
    assert len(first) == 10
    assert all(-5.0 <= v <= 5.0 for v in first)
    assert first == second


def test_generate_different_seeds_differ():
    assert generate(10, 0.0, 1.0, seed=1) != generate(10, 0.0, 1.0, seed=2)


def test_generate_matrix_shape_and_bounds():
    matrix = generate_matrix(4, 7, 2.0, 3.0)
    assert len(matrix) == 4
    assert all(len(row) == 7 for row in matrix)
    assert all(2.0 <= v <= 3.0 for row in matrix for v in row)


def test_generate_matrix_fixed_seed_is_reproducible():
    first = generate_matrix(3, 3, 0.0, 1.0, seed=7)
    second = generate_matrix(3, 3, 0.0, 1.0, seed=7)
    assert [len(row) for row in first] == [3, 3, 3]
    assert first == second


def test_session_format_with_key():
    parts = generate_session("abc", 3).split("-")
    assert len(parts) == 4
    assert parts[-1] == "abc"
    assert all(len(p) == 6 and p.isdigit() for p in parts[:-1])


def test_session_default_key_and_size():
    session = generate_session()
    parts = session.split("-")
    assert parts[-1] == UNKNOWN
    assert len(parts) == 4
    assert all(100000 <= int(p) <= 999999 for p in parts[:-1])


def test_session_size_zero_is_only_key():
    assert generate_session("k", 0) == "k"