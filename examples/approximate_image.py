#!/usr/bin/env python
"""Evolve raw RGBA bytes toward a small smiley image.

Usage: python examples/approximate_image.py [--size PX] [--generations N] [--seed S]
"""

import argparse
import logging

from bitgenes.evolution import EngineBuilder
from bitgenes.targets import ImageTarget, smiley


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--size", type=int, default=6)
    parser.add_argument("--population", type=int, default=1000)
    parser.add_argument("--generations", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")

    target = ImageTarget(smiley(args.size))
    check = ImageTarget(target.pixels)

    engine = (
        EngineBuilder()
        .size(args.population)
        .genome_bits(target.genome_bits)
        .mutation_rate(0.2)
        .scorer(target)
        .seed(args.seed)
        .build()
    )

    for generation in range(args.generations):
        print(f"step: {generation}")
        engine.step()
        print(f"delta: {check.score(engine.best())}")

    approximation = target.decode(engine.best())
    print("alpha channel of the best approximation:")
    print(approximation[:, :, 3])


if __name__ == "__main__":
    main()
