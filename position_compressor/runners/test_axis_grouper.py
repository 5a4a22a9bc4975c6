"""
Smoke test for axis grouping.

Test scenario:
  - 3 pieces: (0, 0), (5, 3), (1_000_000, 7)
  - MIN_ARBITRARY_DISTANCE = 10
  - Expected x groups: [0..5], [1_000_000]
  - Expected y groups: [0..7] (every gap is at most 10)
"""

from position_compressor.grouping.axis_grouper import (
    U_AXIS,
    V_AXIS,
    X_AXIS,
    Y_AXIS,
    axes_for_mode,
    build_axis_orders,
    collect_pieces,
    group_axis,
)


def build_sample_pieces():
    return collect_pieces({"0,0": 2, "5,3": 52, "1000000,7": 19})


def test_orthogonal_groups():
    """Close pieces share a group, distant ones do not."""
    print("\n" + "=" * 70)
    print("TEST: Orthogonal grouping")
    print("=" * 70)

    pieces = build_sample_pieces()
    sorted_pieces, axis_orders = build_axis_orders(pieces, "orthogonal", 10)

    assert set(axis_orders) == {X_AXIS, Y_AXIS}, f"Unexpected axes: {set(axis_orders)}"

    x_ranges = [g.range for g in axis_orders[X_AXIS]]
    y_ranges = [g.range for g in axis_orders[Y_AXIS]]
    print(f"  x ranges: {x_ranges}")
    print(f"  y ranges: {y_ranges}")

    assert x_ranges == [(0, 5), (1_000_000, 1_000_000)], f"Got x ranges {x_ranges}"
    assert y_ranges == [(0, 7)], f"Got y ranges {y_ranges}"

    # Groups partition the sorted list, in order
    for axis, order in axis_orders.items():
        flattened = [p for g in order for p in g.pieces]
        assert flattened == sorted_pieces[axis], f"Groups on {axis} do not partition the sorted pieces"

    print("  ✓ test_orthogonal_groups: PASSED")


def test_diagonal_groups():
    """Diagonal mode adds the u = y - x and v = y + x axes."""
    print("\n" + "=" * 70)
    print("TEST: Diagonal grouping")
    print("=" * 70)

    pieces = build_sample_pieces()
    _, axis_orders = build_axis_orders(pieces, "diagonal", 10)

    assert set(axis_orders) == {X_AXIS, Y_AXIS, U_AXIS, V_AXIS}

    # u values: 0, -2, -999993
    u_ranges = [g.range for g in axis_orders[U_AXIS]]
    # v values: 0, 8, 1000007
    v_ranges = [g.range for g in axis_orders[V_AXIS]]
    print(f"  u ranges: {u_ranges}")
    print(f"  v ranges: {v_ranges}")

    assert u_ranges == [(-999_993, -999_993), (-2, 0)], f"Got u ranges {u_ranges}"
    assert v_ranges == [(0, 8), (1_000_007, 1_000_007)], f"Got v ranges {v_ranges}"

    print("  ✓ test_diagonal_groups: PASSED")


def test_threshold_is_inclusive():
    """A gap of exactly MIN_ARBITRARY_DISTANCE stays in the group; one more splits it."""
    pieces = collect_pieces([((0, 0), 1), ((10, 0), 1), ((21, 0), 1)])
    _, order = group_axis(pieces, X_AXIS, 10)

    assert [g.range for g in order] == [(0, 10), (21, 21)], \
        f"Got {[g.range for g in order]}"

    print("  ✓ test_threshold_is_inclusive: PASSED")


def test_chain_extends_group():
    """Gaps are measured from the running end of the group, so chains link."""
    pieces = collect_pieces([((x, 0), 1) for x in (0, 8, 16, 24)])
    _, order = group_axis(pieces, X_AXIS, 10)

    assert len(order) == 1, f"Expected one group, got {len(order)}"
    assert order[0].range == (0, 24)
    assert order[0].size == 24

    print("  ✓ test_chain_extends_group: PASSED")


def test_huge_coordinates():
    """Coordinates far beyond float precision group exactly."""
    big = 10 ** 40
    pieces = collect_pieces([((big, 0), 1), ((big + 1, 0), 1), ((big + 12, 0), 1)])
    _, order = group_axis(pieces, X_AXIS, 10)

    assert [g.range for g in order] == [(big, big + 1), (big + 12, big + 12)]

    print("  ✓ test_huge_coordinates: PASSED")


def test_invalid_input():
    """Duplicate squares, non-int coordinates and unknown modes are rejected."""
    try:
        collect_pieces([((0, 0), 1), ((0, 0), 2)])
        raise AssertionError("Expected ValueError for a duplicate square")
    except ValueError as e:
        print(f"  ✓ Caught expected error: {e}")

    try:
        collect_pieces([((0.5, 0), 1)])
        raise AssertionError("Expected ValueError for a float coordinate")
    except ValueError as e:
        print(f"  ✓ Caught expected error: {e}")

    try:
        axes_for_mode("hexagonal")
        raise AssertionError("Expected ValueError for an unknown mode")
    except ValueError as e:
        print(f"  ✓ Caught expected error: {e}")

    print("  ✓ test_invalid_input: PASSED")


def test_empty_position():
    pieces = collect_pieces({})
    sorted_pieces, axis_orders = build_axis_orders(pieces, "orthogonal", 10)

    assert sorted_pieces == {X_AXIS: [], Y_AXIS: []}
    assert axis_orders == {X_AXIS: [], Y_AXIS: []}

    print("  ✓ test_empty_position: PASSED")


if __name__ == "__main__":
    print("\n" + "=" * 70)
    print("AXIS GROUPER SMOKE TEST SUITE")
    print("=" * 70)

    test_orthogonal_groups()
    test_diagonal_groups()
    test_threshold_is_inclusive()
    test_chain_extends_group()
    test_huge_coordinates()
    test_invalid_input()
    test_empty_position()

    print("\n" + "=" * 70)
    print("✓ ALL TESTS PASSED")
    print("=" * 70)
