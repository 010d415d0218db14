from enum import Enum


class Symbol(str, Enum):
    """Tokens produced by the classifier. J and Z need motion and are not covered."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    K = "K"
    L = "L"
    M = "M"
    N = "N"
    O = "O"  # noqa: E741
    P = "P"
    Q = "Q"
    R = "R"
    S = "S"
    T = "T"
    U = "U"
    V = "V"
    W = "W"
    X = "X"
    Y = "Y"

    FIST_AMBIGUOUS = "FIST_AMBIGUOUS"
    WAVE = "WAVE"
    NO_HAND = "NO_HAND"

    @property
    def is_letter(self) -> bool:
        return len(self.value) == 1


LETTERS = tuple(s for s in Symbol if s.is_letter)
SENTINELS = (Symbol.FIST_AMBIGUOUS, Symbol.WAVE, Symbol.NO_HAND)

# UI labels (the core never commits these)
DISPLAY = {
    Symbol.FIST_AMBIGUOUS: "🖐️",
    Symbol.WAVE: "👋 HELLO",
    Symbol.NO_HAND: "👀 Show Hand",
}


def display(symbol: Symbol) -> str:
    return DISPLAY.get(symbol, symbol.value)
