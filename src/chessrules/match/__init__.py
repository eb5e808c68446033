from .agents import Agent, RandomAgent
from .runner import GameRecord, MatchResult, play_game, play_match

__all__ = ["Agent", "GameRecord", "MatchResult", "RandomAgent", "play_game", "play_match"]
