from tetris_piece import PIECES
from tetris_rng import BagRandom


def draws(rng, n):
    return [rng.next_piece() for _ in range(n)]


def test_each_bag_has_every_piece():
    for seed in (0, 1, 7, 12345):
        rng = BagRandom(seed)
        for _ in range(20):
            assert sorted(draws(rng, 7)) == sorted(PIECES)


def test_same_seed_same_sequence():
    assert draws(BagRandom(3), 50) == draws(BagRandom(3), 50)
    assert draws(BagRandom(0), 70) != draws(BagRandom(1), 70)


def test_longest_wait_is_bounded():
    seq = draws(BagRandom(42), 700)
    for t in PIECES:
        seen = [i for i, p in enumerate(seq) if p == t]
        assert max(b - a for a, b in zip(seen, seen[1:])) <= 13
