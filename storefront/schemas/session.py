from pydantic import BaseModel


class LoginForm(BaseModel):
    name: str = ""
    password: str = ""
