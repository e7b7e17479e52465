"""Falling Blocks: a falling-block puzzle engine with pygame and gymnasium adapters."""

from falling_blocks.game import Action, FallingBlockGame, GameConfig

__all__ = ["Action", "FallingBlockGame", "GameConfig"]
