from __future__ import annotations

import argparse
import logging
import os
from typing import Callable, Dict

import gymnasium as gym

import block_stack_rl.env  # noqa: F401  ensure registration
from block_stack_rl.env.wrappers import ResampleInvalidActionWrapper

logger = logging.getLogger(__name__)


def make_env(
    difficulty: str = "easy", agent_player: str = "white", masked: bool = False, seed: int | None = None
) -> gym.Env:
    env = gym.make("BlockStack-v0", opponent_difficulty=difficulty, agent_player=agent_player)
    if masked:
        from sb3_contrib.common.wrappers import ActionMasker

        env = ActionMasker(env, lambda e: e.unwrapped.get_action_mask())
    else:
        # Vanilla PPO never sees the mask, so illegal picks are swapped out
        env = ResampleInvalidActionWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def env_factory(args: argparse.Namespace, rank: int) -> Callable[[], gym.Env]:
    # Alternate colours across workers when training both sides
    colour = args.agent_player
    if colour == "both":
        colour = "white" if rank % 2 == 0 else "black"

    def thunk() -> gym.Env:
        return make_env(args.difficulty, colour, masked=args.algo == "maskable", seed=args.seed + rank)

    return thunk


def evaluate(model, args: argparse.Namespace, episodes: int) -> Dict[str, int]:
    """Play greedy episodes against the engine and tally the outcomes."""
    masked = args.algo == "maskable"
    results = {"wins": 0, "losses": 0, "draws": 0}
    for ep in range(episodes):
        colour = args.agent_player
        if colour == "both":
            colour = "white" if ep % 2 == 0 else "black"
        env = make_env(args.difficulty, colour, masked=masked)
        obs, info = env.reset(seed=10_000 + ep)
        terminated = truncated = False
        reward = 0.0
        while not (terminated or truncated):
            if masked:
                action, _ = model.predict(obs, deterministic=True, action_masks=info["action_mask"])
            else:
                action, _ = model.predict(obs, deterministic=True)
            obs, reward, terminated, truncated, info = env.step(int(action))
        if reward > 0:
            results["wins"] += 1
        elif reward < 0:
            results["losses"] += 1
        else:
            results["draws"] += 1
        env.close()
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Train a PPO agent against the Block Stack search engine")
    p.add_argument("--algo", choices=["ppo", "maskable"], default="maskable")
    p.add_argument("--difficulty", choices=["easy", "medium", "hard"], default="easy")
    p.add_argument("--agent_player", choices=["white", "black", "both"], default="both")
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--n_envs", type=int, default=4)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--checkpoint_every", type=int, default=50_000)
    p.add_argument("--eval_episodes", type=int, default=20)
    p.add_argument("--logdir", type=str, default="./logs/blockstack")
    p.add_argument("--save_path", type=str, default="./models/blockstack.zip")
    return p


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    args = build_parser().parse_args()

    from stable_baselines3.common.callbacks import CheckpointCallback
    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    if args.algo == "maskable":
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    vec_env = VecMonitor(SubprocVecEnv([env_factory(args, i) for i in range(args.n_envs)]))
    model = Algo(policy="MultiInputPolicy", env=vec_env, seed=args.seed, verbose=1, tensorboard_log=args.logdir)

    save_dir = os.path.dirname(args.save_path) or "."
    os.makedirs(save_dir, exist_ok=True)
    checkpoints = CheckpointCallback(
        save_freq=max(1, args.checkpoint_every // args.n_envs), save_path=save_dir, name_prefix="blockstack"
    )
    logger.info("training %s vs %s engine for %d steps", args.algo, args.difficulty, args.timesteps)
    model.learn(total_timesteps=args.timesteps, callback=checkpoints)
    model.save(args.save_path)
    vec_env.close()

    if args.eval_episodes > 0:
        results = evaluate(model, args, args.eval_episodes)
        logger.info(
            "evaluation vs %s: %d wins, %d losses, %d draws",
            args.difficulty,
            results["wins"],
            results["losses"],
            results["draws"],
        )


if __name__ == "__main__":  # pragma: no cover
    main()
