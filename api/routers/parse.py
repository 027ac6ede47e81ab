"""
Router: POST /parse
Zwraca drzewo parsowania linii bez liczenia.
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_parser
from api.schemas import ParseRequest, ParseResponse
from ports.expression_parser import ExpressionParser

router = APIRouter(prefix="/parse", tags=["parse"])


@router.post("", response_model=ParseResponse)
async def parse(body: ParseRequest, parser: ExpressionParser = Depends(get_parser)):
    outcome = parser.parse(body.line)
    return ParseResponse(ok=outcome.ok, tree=outcome.program, diagnostic=outcome.error)
