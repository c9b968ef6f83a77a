"""Gymnasium environments for sliding-block puzzles."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .sliding_blocks_env import SlidingBlocksEnv, decode_action, encode_action
from .wrappers import ResampleInvalidActionWrapper

register(
    id="SlidingBlocks-5x4-v0",
    entry_point="sliding_blocks.env.sliding_blocks_env:SlidingBlocksEnv",
)

__all__ = [
    "SlidingBlocksEnv",
    "ResampleInvalidActionWrapper",
    "decode_action",
    "encode_action",
]
