from pydantic import BaseModel


class ChatResponse(BaseModel):
    reply: str


class ErrorResponse(BaseModel):
    error: str
