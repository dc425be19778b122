from pydantic import BaseModel


class ProductCreatedResponse(BaseModel):
    message: str
    id: int


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
