from probability_navmesh.observation_mask import ObservationMask


def test_mark_is_idempotent():
    once = ObservationMask()
    once.mark(3)

    twice = ObservationMask()
    twice.mark(3)
    twice.mark(3)

    assert once == twice
    assert len(twice) == 1
    assert twice.is_observed(3)


def test_unmark_absent_is_noop():
    mask = ObservationMask([1, 2])
    mask.unmark(7)
    assert list(mask) == [1, 2]


def test_unmark_removes():
    mask = ObservationMask()
    mask.mark(4)
    mask.unmark(4)
    assert 4 not in mask
    assert len(mask) == 0


def test_update_replaces_observed_set():
    mask = ObservationMask([1, 2, 3])
    mask.update([3, 4])
    assert list(mask) == [3, 4]


def test_iteration_is_sorted():
    mask = ObservationMask([9, 2, 5])
    assert list(mask) == [2, 5, 9]


def test_clear():
    mask = ObservationMask([1, 2])
    mask.clear()
    assert len(mask) == 0
    assert not mask.is_observed(1)
