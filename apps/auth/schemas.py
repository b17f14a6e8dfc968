from pydantic import BaseModel, EmailStr, Field as PydanticField


class AdminLogin(BaseModel):
    email: EmailStr
    password: str = PydanticField(..., min_length=1, max_length=128)


class LoginResponse(BaseModel):
    message: str
    admin_id: int = PydanticField(alias="adminId")
    email: str
    name: str

    class Config:
        populate_by_name = True
