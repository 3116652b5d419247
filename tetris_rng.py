"""7-bag randomizer module"""
import random
from collections import deque

from tetris_piece import PIECES


class BagRandom:
    """Deals the seven pieces in shuffled bags.

    Every aligned run of 7 draws holds each type exactly once, so a type
    can repeat at most once across a bag boundary and never waits more than
    12 draws.
    """

    def __init__(self, seed: int = 0):
        self.seed = seed
        self.rng = random.Random(seed)
        self.queue = deque()

    def _refill(self):
        bag = list(PIECES)
        self.rng.shuffle(bag)
        self.queue.extend(bag)

    def next_piece(self) -> str:
        if not self.queue:
            self._refill()
        return self.queue.popleft()
