from fastapi import APIRouter

from handspell.backend.api.schemas.symbol import SymbolOut
from handspell.backend.ml.fingerspell.symbols import Symbol, display

router = APIRouter(prefix="/api/v1", tags=["symbols"])


@router.get("/symbols", response_model=list[SymbolOut])
def list_symbols():
    return [
        SymbolOut(symbol=s.value, display=display(s), is_letter=s.is_letter)
        for s in Symbol
    ]
