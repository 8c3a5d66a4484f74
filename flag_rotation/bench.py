# FILE: flag_rotation/bench.py
"""
Bench queue: a circular order of active player ids. The front `sit_count`
entries sit this series, the next `team_size` play.
"""
from __future__ import annotations
from typing import Iterable, List, Tuple


def sit_count(active_count: int, team_size: int) -> int:
    return max(0, active_count - team_size)


def advance_for(active_count: int, team_size: int) -> int:
    # rotate by one even when nobody sits, so role order keeps moving
    return max(1, sit_count(active_count, team_size))


def split_queue(queue: List[str], team_size: int) -> Tuple[List[str], List[str]]:
    sits = sit_count(len(queue), team_size)
    return queue[:sits], queue[sits:sits + team_size]


def rotate_left(queue: List[str], n: int) -> List[str]:
    if not queue:
        return []
    n %= len(queue)
    return queue[n:] + queue[:n]


def rotate_right(queue: List[str], n: int) -> List[str]:
    if not queue:
        return []
    return rotate_left(queue, len(queue) - (n % len(queue)))


def reconcile_queue(queue: Iterable[str], active_ids: List[str]) -> List[str]:
    """
    Keep active ids in their current relative order, drop stale or repeated
    ids, then append newly-active ids in roster order.
    """
    active = set(active_ids)
    kept: List[str] = []
    seen = set()
    for pid in queue:
        if pid in active and pid not in seen:
            kept.append(pid)
            seen.add(pid)
    tail = [pid for pid in active_ids if pid not in seen]
    return kept + tail
