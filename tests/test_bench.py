# FILE: tests/test_bench.py
from flag_rotation.bench import (
    advance_for, reconcile_queue, rotate_left, rotate_right, sit_count, split_queue,
)

def test_sit_count_and_advance():
    assert sit_count(10, 7) == 3
    assert sit_count(7, 7) == 0
    assert sit_count(5, 7) == 0
    assert advance_for(10, 7) == 3
    # nobody sits -> still rotate by one
    assert advance_for(7, 7) == 1

def test_split_queue_front_sits():
    q = list("abcdefghi")
    sitting, playing = split_queue(q, 7)
    assert sitting == ["a", "b"]
    assert playing == list("cdefghi")

def test_rotate_left_then_right_is_identity():
    q = list("abcde")
    assert rotate_left(q, 2) == list("cdeab")
    assert rotate_right(rotate_left(q, 2), 2) == q
    assert rotate_left(q, 7) == rotate_left(q, 2)
    assert rotate_left([], 3) == []

def test_reconcile_keeps_order_drops_stale_appends_new():
    queue = ["c", "x", "a", "c"]
    active = ["a", "b", "c", "d"]  # roster order
    assert reconcile_queue(queue, active) == ["c", "a", "b", "d"]
