"""
Router: POST /eval
Liczy jedną linię VinLisp. Błąd składni to zwykła odpowiedź 200 z ok=false.
"""
from fastapi import APIRouter, Depends

from adapters.shell.session import Session
from api.dependencies import get_session
from api.schemas import EvalRequest, EvalResponse
from contracts import ErrorValue

router = APIRouter(prefix="/eval", tags=["eval"])


@router.post("", response_model=EvalResponse)
async def evaluate(body: EvalRequest, session: Session = Depends(get_session)):
    result = session.run_line(body.line)
    if result.result is None:
        return EvalResponse(
            ok=False,
            rendered=result.rendered,
            diagnostic=result.parse.error,
        )

    value = result.result.value
    if isinstance(value, ErrorValue):
        return EvalResponse(
            ok=True,
            error=value.error,
            rendered=result.rendered,
            steps=result.result.steps,
        )
    return EvalResponse(
        ok=True,
        value=value.value,
        rendered=result.rendered,
        steps=result.result.steps,
    )
