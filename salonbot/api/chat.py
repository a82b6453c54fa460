from fastapi import APIRouter, Depends

from salonbot.api.schemas import ButtonSchema, ChatRequestSchema, ChatResponseSchema
from salonbot.application.use_cases.handle_turn import HandleTurnUseCase
from salonbot.application.utils.state_codec import session_from_payload, temp_booking_to_payload
from salonbot.domain.entities.turn import TurnInput
from salonbot.wiring.dependencies import get_handle_turn_use_case

router = APIRouter()


@router.post("/chat", response_model=ChatResponseSchema, response_model_exclude_none=True)
def chat(
    req: ChatRequestSchema,
    uc: HandleTurnUseCase = Depends(get_handle_turn_use_case),
):
    state = session_from_payload(step=req.step, phone=req.phone, temp_booking=req.temp_booking)
    result = uc.execute(TurnInput(text=req.text, state=state, button=req.button))

    return ChatResponseSchema(
        reply=result.reply,
        next_step=result.next_step.value,
        phone=result.phone,
        temp_booking=temp_booking_to_payload(result.temp_booking),
        buttons=[ButtonSchema(id=b.id, title=b.title) for b in result.buttons],
    )
