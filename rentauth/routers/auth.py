from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from rentauth.domain.roles import SELF_SERVICE_ROLES, UserRole
from rentauth.services.account_service import AccountInfo, AccountService, ValidationFailedError
from rentauth.services.session_service import (
    clear_session_cookie,
    delete_session,
    issue_session,
    session_token,
    set_session_cookie,
)

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterForm(BaseModel):
    phone: str = Field(min_length=1, max_length=32)
    password: str = Field(min_length=6, max_length=128)
    role: UserRole = UserRole.TENANT


class LoginForm(BaseModel):
    phone: str = Field(min_length=1, max_length=32)
    password: str = Field(min_length=1, max_length=128)


class ResetTokenForm(BaseModel):
    phone: str = Field(min_length=1, max_length=32)


class ResetPasswordForm(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6, max_length=128)


def account_service(request: Request) -> AccountService:
    return request.app.state.account_service


def account_payload(info: AccountInfo) -> dict:
    data = asdict(info)
    data["authorities"] = sorted(info.authorities)
    return data


@router.post("/register", status_code=201)
def register(form: RegisterForm, service: AccountService = Depends(account_service)):
    if form.role not in SELF_SERVICE_ROLES:
        raise ValidationFailedError("Role cannot be self-assigned")
    info = service.register_by_phone(form.phone, form.password, [form.role])
    return account_payload(info)


@router.post("/login")
def login(form: LoginForm, service: AccountService = Depends(account_service)):
    info = service.authenticate(form.phone, form.password)
    token = issue_session(info.id)
    response = JSONResponse({"account": account_payload(info), "session_token": token})
    set_session_cookie(response, token)
    return response


@router.post("/logout", status_code=204)
def logout(request: Request):
    delete_session(session_token(request))
    response = Response(status_code=204)
    clear_session_cookie(response)
    return response


@router.post("/password/reset-token")
def reset_token(form: ResetTokenForm, service: AccountService = Depends(account_service)):
    return {"token": service.generate_reset_token(form.phone)}


@router.post("/password/reset", status_code=204)
def reset_password(form: ResetPasswordForm, service: AccountService = Depends(account_service)):
    service.reset_password_by_token(form.password, form.token)
