"""
Headless random-policy rollouts of the arena, with summary statistics
"""

import argparse
import logging
from typing import Dict, Optional

import numpy as np

from neon_arena.arena_env import ArenaEnv
from neon_arena.configs.arena_config import ENV_CONFIG, LEVEL_TABLE, PLAYER_CONFIG, REWARD_CONFIG, SESSION_CONFIG
from neon_arena.levels import levels_from_dicts


def make_env(render: bool = False, **overrides) -> ArenaEnv:
    """Build an ArenaEnv from the shared config dicts"""
    config = dict(ENV_CONFIG)
    config.update(overrides)
    return ArenaEnv(
        render_mode="human" if render else None,
        levels=levels_from_dicts(LEVEL_TABLE),
        player_config=PLAYER_CONFIG,
        session_config=SESSION_CONFIG,
        reward_config=REWARD_CONFIG,
        **config,
    )


def run_rollouts(n_episodes: int = 10, seed: Optional[int] = None, render: bool = False,
                 **env_overrides) -> Dict[str, float]:
    """
    Run random-policy episodes

    Args:
        n_episodes: Number of episodes
        seed: Base seed; episode i uses seed + i
        render: Watch the episodes in a window
    """
    env = make_env(render=render, **env_overrides)

    episode_rewards = []
    episode_lengths = []
    episode_scores = []
    episode_levels = []

    for episode in range(n_episodes):
        episode_seed = seed + episode if seed is not None else None
        obs, info = env.reset(seed=episode_seed)
        env.action_space.seed(episode_seed)

        terminated = False
        truncated = False
        total_reward = 0.0
        steps = 0

        while not (terminated or truncated):
            action = env.action_space.sample()
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += reward
            steps += 1

        episode_rewards.append(total_reward)
        episode_lengths.append(steps)
        episode_scores.append(info["score"])
        episode_levels.append(info["level"])

        print(f"Episode {episode + 1}/{n_episodes}: "
              f"Reward = {total_reward:.2f}, Length = {steps}, "
              f"Score = {info['score']}, Level = {info['level']}")

    env.close()

    results = {
        "mean_reward": float(np.mean(episode_rewards)),
        "std_reward": float(np.std(episode_rewards)),
        "mean_length": float(np.mean(episode_lengths)),
        "mean_score": float(np.mean(episode_scores)),
        "max_level": int(np.max(episode_levels)),
    }

    print("\n" + "="*50)
    print(f"Rollout Results ({n_episodes} episodes):")
    print(f"Mean Reward: {results['mean_reward']:.2f} ± {results['std_reward']:.2f}")
    print(f"Mean Episode Length: {results['mean_length']:.1f}")
    print(f"Mean Score: {results['mean_score']:.1f}")
    print(f"Highest Level Reached: {results['max_level']}")
    print("="*50)

    return results


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run random-policy rollouts headlessly")
    parser.add_argument(
        "--n-episodes",
        type=int,
        default=10,
        help="Number of episodes (default: 10)",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=ENV_CONFIG["max_steps"],
        help=f"Step limit per episode (default: {ENV_CONFIG['max_steps']})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)",
    )
    parser.add_argument("--render", action="store_true", help="Watch the rollouts")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    return run_rollouts(
        n_episodes=args.n_episodes,
        seed=args.seed,
        render=args.render,
        max_steps=args.max_steps,
    )


if __name__ == "__main__":
    main()
