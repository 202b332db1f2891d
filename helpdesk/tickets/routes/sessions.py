from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from helpdesk.core.rate_limit import limiter
from helpdesk.core.schemas import ApiResponse, success_response
from helpdesk.core.security import set_ticket_session_cookie
from helpdesk.db.session import get_db
from helpdesk.tickets.schemas.session import TicketCheckRequest, TicketCheckResponse
from helpdesk.tickets.services.session_service import TicketSessionService

router = APIRouter()


@router.post("/ticket/check", response_model=ApiResponse[TicketCheckResponse])
@limiter.limit("10/minute")
async def check_ticket(
    request: Request,
    response: Response,
    data: TicketCheckRequest,
    db: Session = Depends(get_db),
) -> ApiResponse[TicketCheckResponse]:
    """Open a guest session for a ticket, proving access with its email."""
    service = TicketSessionService(db)
    session_id, token = await service.open_session(data.ticket_number, data.email)
    set_ticket_session_cookie(response, session_id)
    return success_response(TicketCheckResponse(ticket_number=data.ticket_number, token=token))
