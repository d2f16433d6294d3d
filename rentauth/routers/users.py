from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from rentauth.domain.caller import CallerContext
from rentauth.routers.auth import account_payload, account_service
from rentauth.services.account_service import AccountNotFoundError, AccountService
from rentauth.services.session_service import require_caller

router = APIRouter(prefix="/users", tags=["users"])


class ProfileForm(BaseModel):
    nick_name: str = Field(min_length=1, max_length=64)
    avatar: Optional[str] = Field(default=None, max_length=512)
    introduction: Optional[str] = None


class AvatarForm(BaseModel):
    avatar: str = Field(min_length=1, max_length=512)


class PasswordForm(BaseModel):
    old_password: str = ""
    new_password: str = Field(min_length=6, max_length=128)


@router.get("/me")
def me(caller: CallerContext = Depends(require_caller), service: AccountService = Depends(account_service)):
    info = service.find_by_id(caller.account_id)
    if not info:
        raise AccountNotFoundError()
    return account_payload(info)


@router.put("/me")
def update_me(
    form: ProfileForm,
    caller: CallerContext = Depends(require_caller),
    service: AccountService = Depends(account_service),
):
    info = service.update_profile(
        caller.account_id,
        nick_name=form.nick_name,
        avatar=form.avatar,
        introduction=form.introduction,
    )
    return account_payload(info)


@router.put("/me/avatar", status_code=204)
def update_avatar(
    form: AvatarForm,
    caller: CallerContext = Depends(require_caller),
    service: AccountService = Depends(account_service),
):
    service.update_avatar(caller, form.avatar)


@router.put("/me/password", status_code=204)
def change_password(
    form: PasswordForm,
    caller: CallerContext = Depends(require_caller),
    service: AccountService = Depends(account_service),
):
    service.change_password(caller, form.old_password, form.new_password)
