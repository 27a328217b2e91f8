from .random_provider import RandomProvider, SequenceRandom

__all__ = ["RandomProvider", "SequenceRandom"]
