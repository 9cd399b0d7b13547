"""Gymnasium environments for Block Stack RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Agent vs. search engine, one colour each
register(
    id="BlockStack-v0",
    entry_point="block_stack_rl.env.block_stack_env:BlockStackEnv",
)

__all__ = ["BlockStack-v0"]
