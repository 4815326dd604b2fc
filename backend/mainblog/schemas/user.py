"""
Main Blog Backend — Authentication Schemas
============================================

What:  JSON bodies for POST /register and POST /login and their responses.
"""

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """
    Username/password pair sent to both /register and /login.

    An empty or missing username, or a missing password, is answered with
    400 by the RequestValidationError handler.
    """
    username: str = Field(min_length=1, description="Account name (exact match, case-sensitive)")
    password: str = Field(description="Plaintext password; hashed before storage")


class LoginResponse(BaseModel):
    """
    Successful login.

    No token or session is issued: the client keeps the returned username and
    sends it as `author` / `?username=` on later requests.
    """
    message: str = Field(default="Login successful")
    username: str = Field(description="The authenticated username, echoed verbatim")
