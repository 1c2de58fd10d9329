from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# bcrypt only looks at the first 72 bytes of a secret.
_BCRYPT_MAX_BYTES = 72


class RegisterRequest(BaseModel):
    # JSON clients may send numeric ids; keep them as text.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(min_length=1, max_length=200)
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("id", "name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return str(value).strip().lower()

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > _BCRYPT_MAX_BYTES:
            raise ValueError(f"must be at most {_BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=1)

    @field_validator("id")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    external_id: str = Field(alias="externalId")
    display_name: str = Field(alias="displayName")
    email: str

    @classmethod
    def from_user(cls, user) -> "UserProfile":
        return cls(external_id=user.external_id, display_name=user.display_name, email=user.email)
