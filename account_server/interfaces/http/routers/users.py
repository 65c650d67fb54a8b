"""User account endpoints: registration, login, profile, administration and statistics."""
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from account_server.interfaces.http.deps import get_account_service, get_client_ip
from account_server.modules.accounts import (
    Account,
    AccountNotFoundError,
    AccountProfileUpdate,
    AccountRegisterInput,
    AccountRole,
    AccountService,
    AccountStatus,
    AccountValidationError,
)
from account_server.modules.accounts.validation import MSG_WEAK_PASSWORD, is_blank, is_strong_password
from account_server.schemas import (
    AccountResponse,
    ApiResponse,
    ListResponse,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    StatisticsResponse,
)

router = APIRouter()

INVALID_CREDENTIALS = "用户名或密码错误"


def _view(account: Account) -> AccountResponse:
    return AccountResponse.model_validate(account)


def _listing(accounts) -> ListResponse[AccountResponse]:
    data = [_view(account) for account in accounts]
    return ListResponse[AccountResponse](data=data, total=len(data))


@router.post("/register", response_model=ApiResponse[AccountResponse], summary="用户注册")
async def register(
    payload: RegisterRequest,
    account_service: AccountService = Depends(get_account_service),
):
    account = await account_service.register(AccountRegisterInput(**payload.model_dump()))
    return ApiResponse[AccountResponse](message="注册成功", data=_view(account))


@router.post("/login", response_model=ApiResponse[AccountResponse], summary="用户登录（用户名或邮箱）")
async def login(
    payload: LoginRequest,
    client_ip: Optional[str] = Depends(get_client_ip),
    account_service: AccountService = Depends(get_account_service),
):
    if is_blank(payload.username):
        raise AccountValidationError("用户名不能为空")
    if is_blank(payload.password):
        raise AccountValidationError("密码不能为空")

    account = await account_service.authenticate(payload.username, payload.password)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    refreshed = await account_service.record_login(account.id, client_ip)
    return ApiResponse[AccountResponse](message="登录成功", data=_view(refreshed or account))


@router.get("", response_model=ListResponse[AccountResponse], summary="用户列表")
async def list_accounts(
    account_status: Optional[AccountStatus] = Query(None, alias="status"),
    role: Optional[AccountRole] = Query(None),
    account_service: AccountService = Depends(get_account_service),
):
    return _listing(await account_service.list_accounts(status=account_status, role=role))


@router.get("/search", response_model=ListResponse[AccountResponse], summary="搜索用户")
async def search_accounts(
    keyword: Optional[str] = Query(None),
    account_service: AccountService = Depends(get_account_service),
):
    return _listing(await account_service.search(keyword))


@router.get("/registrations", response_model=ListResponse[AccountResponse], summary="按注册时间查询")
async def list_registrations(
    start: datetime = Query(...),
    end: datetime = Query(...),
    account_service: AccountService = Depends(get_account_service),
):
    # 不带时区的时间按服务器本地时间处理
    start, end = start.astimezone(timezone.utc), end.astimezone(timezone.utc)
    if end <= start:
        raise AccountValidationError("结束时间必须晚于开始时间")
    return _listing(await account_service.list_registered_between(start, end))


@router.get("/statistics", response_model=ApiResponse[StatisticsResponse], summary="用户统计")
async def statistics(account_service: AccountService = Depends(get_account_service)):
    stats = await account_service.statistics()
    return ApiResponse[StatisticsResponse](data=StatisticsResponse.model_validate(stats))


@router.get("/{account_id}", response_model=ApiResponse[AccountResponse], summary="用户详情")
async def get_account(
    account_id: str,
    account_service: AccountService = Depends(get_account_service),
):
    account = await account_service.get_by_id(account_id)
    if account is None:
        raise AccountNotFoundError(account_id)
    return ApiResponse[AccountResponse](data=_view(account))


@router.put("/{account_id}", response_model=ApiResponse[AccountResponse], summary="更新用户资料")
async def update_account(
    account_id: str,
    payload: ProfileUpdateRequest,
    account_service: AccountService = Depends(get_account_service),
):
    try:
        account = await account_service.update_profile(account_id, AccountProfileUpdate(**payload.model_dump()))
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    return ApiResponse[AccountResponse](message="用户信息更新成功", data=_view(account))


@router.put("/{account_id}/password", response_model=ApiResponse, summary="修改密码")
async def change_password(
    account_id: str,
    payload: PasswordChangeRequest,
    account_service: AccountService = Depends(get_account_service),
):
    if is_blank(payload.old_password):
        raise AccountValidationError("旧密码不能为空")
    if is_blank(payload.new_password):
        raise AccountValidationError("新密码不能为空")
    if not is_strong_password(payload.new_password):
        raise AccountValidationError(MSG_WEAK_PASSWORD)

    changed = await account_service.change_password(account_id, payload.old_password, payload.new_password)
    if not changed:
        raise AccountValidationError("密码修改失败，请检查旧密码是否正确")
    return ApiResponse(message="密码修改成功")


async def _apply_status(service: AccountService, account_id: str, target: AccountStatus, action: str) -> ApiResponse:
    try:
        await service.set_status(account_id, target)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"用户{action}失败，用户不存在") from exc
    return ApiResponse(message=f"用户{action}成功")


@router.put("/{account_id}/enable", response_model=ApiResponse, summary="启用用户")
async def enable_account(account_id: str, account_service: AccountService = Depends(get_account_service)):
    return await _apply_status(account_service, account_id, AccountStatus.NORMAL, "启用")


@router.put("/{account_id}/disable", response_model=ApiResponse, summary="禁用用户")
async def disable_account(account_id: str, account_service: AccountService = Depends(get_account_service)):
    return await _apply_status(account_service, account_id, AccountStatus.DISABLED, "禁用")


@router.put("/{account_id}/lock", response_model=ApiResponse, summary="锁定用户")
async def lock_account(account_id: str, account_service: AccountService = Depends(get_account_service)):
    return await _apply_status(account_service, account_id, AccountStatus.LOCKED, "锁定")


@router.put("/{account_id}/verify-email", response_model=ApiResponse[AccountResponse], summary="标记邮箱已验证")
async def verify_email(account_id: str, account_service: AccountService = Depends(get_account_service)):
    account = await account_service.verify_email(account_id)
    return ApiResponse[AccountResponse](message="邮箱验证成功", data=_view(account))


@router.put("/{account_id}/verify-phone", response_model=ApiResponse[AccountResponse], summary="标记手机已验证")
async def verify_phone(account_id: str, account_service: AccountService = Depends(get_account_service)):
    account = await account_service.verify_phone(account_id)
    return ApiResponse[AccountResponse](message="手机验证成功", data=_view(account))


@router.delete("/{account_id}", response_model=ApiResponse, summary="删除用户（软删除）")
async def delete_account(account_id: str, account_service: AccountService = Depends(get_account_service)):
    try:
        await account_service.soft_delete(account_id)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="用户删除失败，用户不存在") from exc
    return ApiResponse(message="用户删除成功")
