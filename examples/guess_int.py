#!/usr/bin/env python
"""Evolve a 64-bit genome toward the largest unsigned 64-bit integer.

Usage: python examples/guess_int.py [--generations N] [--seed S]
"""

import argparse
import logging

from bitgenes.evolution import EvolutionEngine
from bitgenes.targets import IntegerTarget

U64_MAX = 2 ** 64 - 1


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--generations", type=int, default=100)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")

    target = IntegerTarget(U64_MAX, width=64)
    engine = EvolutionEngine(100, target.genome_bits, 0.2, target, seed=args.seed)

    for _ in range(args.generations):
        engine.step()
        guess = target.decode(engine.best())
        print(
            f"Actual: {U64_MAX} | Best guess: {guess} | "
            f"% Difference: {(U64_MAX - guess) / U64_MAX * 100.0:.6f}"
        )


if __name__ == "__main__":
    main()
