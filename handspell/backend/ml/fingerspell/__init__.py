from .classifier import FingerStates, GestureClassifier, HandReading, analyze, classify
from .config import ClassifierThresholds, FingerspellConfig, StabilizerConfig, load_config
from .geometry import HandFrame, InvalidFrame, Keypoint
from .session import FingerspellSession
from .stabilizer import MutationKind, StabilizationState, Stabilizer, TextMutation
from .symbols import LETTERS, Symbol

__all__ = [
    "FingerStates",
    "GestureClassifier",
    "HandReading",
    "analyze",
    "classify",
    "ClassifierThresholds",
    "FingerspellConfig",
    "StabilizerConfig",
    "load_config",
    "HandFrame",
    "InvalidFrame",
    "Keypoint",
    "FingerspellSession",
    "MutationKind",
    "StabilizationState",
    "Stabilizer",
    "TextMutation",
    "LETTERS",
    "Symbol",
]
