from pydantic import BaseModel, ConfigDict, Field


class TicketCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ticket_number: str = Field(..., alias="ticketNumber", min_length=1, max_length=20)
    email: str = Field(..., min_length=3, max_length=255)


class TicketCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ticket_number: str = Field(..., serialization_alias="ticketNumber")
    token: str
