from __future__ import annotations

import argparse
import random

import gymnasium as gym

import block_stack_rl.env  # noqa: F401  ensure registration


def run_random(episodes: int = 20, difficulty: str = "easy", seed: int = 0) -> dict:
    rng = random.Random(seed)
    env = gym.make("BlockStack-v0", opponent_difficulty=difficulty)
    results = {"wins": 0, "losses": 0, "draws": 0}
    for ep in range(episodes):
        obs, info = env.reset(seed=seed + ep)
        terminated = False
        while not terminated:
            # Only valid placements; the agent is always on turn here
            action = rng.choice(info["valid_actions"])
            obs, reward, terminated, truncated, info = env.step(action)
        if reward > 0:
            results["wins"] += 1
        elif reward < 0:
            results["losses"] += 1
        else:
            results["draws"] += 1
    env.close()
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--episodes", type=int, default=20)
    p.add_argument("--difficulty", choices=["easy", "medium", "hard"], default="easy")
    p.add_argument("--seed", type=int, default=0)
    return p


def main() -> None:
    args = build_parser().parse_args()
    results = run_random(args.episodes, args.difficulty, args.seed)
    print(
        f"Random agent vs {args.difficulty}: "
        f"{results['wins']} wins, {results['losses']} losses, {results['draws']} draws"
    )


if __name__ == "__main__":  # pragma: no cover
    main()
