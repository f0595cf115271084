from __future__ import annotations

import random

from spinwheel.api.models import CoinSide


def flip_coin(rng: random.Random) -> CoinSide:
    return CoinSide.heads if rng.random() < 0.5 else CoinSide.tails
