from pydantic import BaseModel


class SymbolOut(BaseModel):
    symbol: str
    display: str
    is_letter: bool
