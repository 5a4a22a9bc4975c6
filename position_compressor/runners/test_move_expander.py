"""
Smoke test for move expansion on hand-built axis orders.

Test scenario (mirrors the compression of (0,0), (5,3), (1_000_000,7)
with MIN_ARBITRARY_DISTANCE = 10):
  - x groups: true [0..5]   -> compressed [0..5]
              true [10^6]   -> compressed [15]
  - y groups: true [0..7]   -> compressed [0..7]
"""

from position_compressor.core.coord_types import Move
from position_compressor.expansion.move_expander import (
    ConfigurationError,
    PrecisionError,
    UnresolvableDestinationError,
    expand_move,
    find_target_axis_value,
    true_end_coords,
)
from position_compressor.grouping.axis_grouper import X_AXIS, Y_AXIS, AxisGroup, PieceRecord


MIN_DISTANCE = 10


def build_sample():
    king = PieceRecord(piece_type=2, coords=(0, 0), transformed_coords=[0, 0])
    queen = PieceRecord(piece_type=52, coords=(5, 3), transformed_coords=[5, 3])
    rook = PieceRecord(piece_type=19, coords=(1_000_000, 7), transformed_coords=[15, 7])
    pieces = [king, queen, rook]

    axis_orders = {
        X_AXIS: [
            AxisGroup(range=(0, 5), pieces=[king, queen], transformed_range=(0, 5)),
            AxisGroup(range=(1_000_000, 1_000_000), pieces=[rook], transformed_range=(15, 15)),
        ],
        Y_AXIS: [
            AxisGroup(range=(0, 7), pieces=[king, queen, rook], transformed_range=(0, 7)),
        ],
    }
    return pieces, axis_orders


def expand(compact):
    pieces, axis_orders = build_sample()
    return expand_move(axis_orders, pieces, Move.from_compact(compact), MIN_DISTANCE)


def test_capture():
    """Landing on a piece expands to that piece's true square."""
    print("\n" + "=" * 70)
    print("TEST: Capture expansion")
    print("=" * 70)

    move = expand("0,0>15,7")
    print(f"  Expanded: {move.to_compact()}")
    assert move == Move((0, 0), (1_000_000, 7)), f"Got {move}"

    # Self-capture: start == end
    assert expand("15,7>15,7") == Move((1_000_000, 7), (1_000_000, 7))

    print("  ✓ test_capture: PASSED")


def test_targeted_group():
    """Empty destinations near a group land on that group's true line."""
    print("\n" + "=" * 70)
    print("TEST: Targeted group expansion")
    print("=" * 70)

    cases = {
        "0,0>15,0": Move((0, 0), (1_000_000, 0)),
        "0,0>17,0": Move((0, 0), (1_000_002, 0)),
        "0,0>11,0": Move((0, 0), (999_996, 0)),
        "0,0>15,15": Move((0, 0), (1_000_000, 1_000_000)),
        # Inside the first x group, exact spacing
        "5,3>3,3": Move((5, 3), (3, 3)),
    }
    for compact, expected in cases.items():
        move = expand(compact)
        print(f"  {compact} -> {move.to_compact()}")
        assert move == expected, f"{compact}: expected {expected.to_compact()}, got {move.to_compact()}"

    print("  ✓ test_targeted_group: PASSED")


def test_overshoot():
    """Past the first or last group the overshoot is carried verbatim."""
    cases = {
        "0,0>100,0": Move((0, 0), (1_000_085, 0)),
        "5,3>-20,3": Move((5, 3), (-20, 3)),
        # Vertical moves skip the x axis and overshoot on y
        "15,7>15,20": Move((1_000_000, 7), (1_000_000, 20)),
        "15,7>15,-30": Move((1_000_000, 7), (1_000_000, -30)),
    }
    for compact, expected in cases.items():
        move = expand(compact)
        assert move == expected, f"{compact}: expected {expected.to_compact()}, got {move.to_compact()}"

    print("  ✓ test_overshoot: PASSED")


def test_start_not_on_piece():
    try:
        expand("1,1>2,2")
        raise AssertionError("Expected ConfigurationError for an empty start square")
    except ConfigurationError as e:
        print(f"  ✓ Caught expected error: {e}")

    print("  ✓ test_start_not_on_piece: PASSED")


def test_non_integer_destination():
    """A (2, 1) leaper targeting x = 1001 from (0, 0) would land on y = 500.5."""
    piece = PieceRecord(piece_type=16, coords=(0, 0), transformed_coords=[0, 0])
    axis_orders = {
        X_AXIS: [
            AxisGroup(range=(0, 0), pieces=[piece], transformed_range=(0, 0)),
            AxisGroup(range=(1001, 1001), pieces=[], transformed_range=(10, 10)),
        ],
        Y_AXIS: [AxisGroup(range=(0, 0), pieces=[piece], transformed_range=(0, 0))],
    }

    try:
        expand_move(axis_orders, [piece], Move((0, 0), (10, 5)), MIN_DISTANCE)
        raise AssertionError("Expected PrecisionError for a non-integer intersection")
    except PrecisionError as e:
        print(f"  ✓ Caught expected error: {e}")

    print("  ✓ test_non_integer_destination: PASSED")


def test_unresolvable_destination():
    """A destination in the middle of a wide compressed gap targets nothing."""
    near = PieceRecord(piece_type=2, coords=(0, 0), transformed_coords=[0, 0])
    far = PieceRecord(piece_type=19, coords=(1000, 1000), transformed_coords=[30, 30])
    axis_orders = {
        axis: [
            AxisGroup(range=(0, 0), pieces=[near], transformed_range=(0, 0)),
            AxisGroup(range=(1000, 1000), pieces=[far], transformed_range=(30, 30)),
        ]
        for axis in (X_AXIS, Y_AXIS)
    }

    try:
        expand_move(axis_orders, [near, far], Move((0, 0), (15, 15)), MIN_DISTANCE)
        raise AssertionError("Expected UnresolvableDestinationError")
    except UnresolvableDestinationError as e:
        print(f"  ✓ Caught expected error: {e}")

    print("  ✓ test_unresolvable_destination: PASSED")


def test_find_target_axis_value():
    _, axis_orders = build_sample()
    order = axis_orders[X_AXIS]

    assert find_target_axis_value(order, 17, MIN_DISTANCE) == 1_000_002
    assert find_target_axis_value(order, 100, MIN_DISTANCE) == 1_000_085
    assert find_target_axis_value(order, -1, MIN_DISTANCE) == -1
    # 10 is within 5 of both groups; the first one wins
    assert find_target_axis_value(order, 10, MIN_DISTANCE) == 10
    assert find_target_axis_value([], 3, MIN_DISTANCE) is None

    print("  ✓ test_find_target_axis_value: PASSED")


def test_true_end_coords_parallel():
    # Horizontal movement line y = 0 never crosses y = 5
    try:
        true_end_coords((0, -1, 0), Y_AXIS, 5)
        raise AssertionError("Expected PrecisionError for parallel lines")
    except PrecisionError as e:
        print(f"  ✓ Caught expected error: {e}")

    assert true_end_coords((1, -1, 0), X_AXIS, 10 ** 30) == (10 ** 30, 10 ** 30)

    print("  ✓ test_true_end_coords_parallel: PASSED")


if __name__ == "__main__":
    print("\n" + "=" * 70)
    print("MOVE EXPANDER SMOKE TEST SUITE")
    print("=" * 70)

    test_capture()
    test_targeted_group()
    test_overshoot()
    test_start_not_on_piece()
    test_non_integer_destination()
    test_unresolvable_destination()
    test_find_target_axis_value()
    test_true_end_coords_parallel()

    print("\n" + "=" * 70)
    print("✓ ALL TESTS PASSED")
    print("=" * 70)
