"""
初始化管理员账号
创建默认的超级管理员账号用于首次登录
"""
import asyncio

from account_server.infrastructure.database import get_session_factory, init_db
from account_server.modules.accounts import AccountRegisterInput, AccountRole, AccountService

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin123"
DEFAULT_EMAIL = "admin@example.com"


async def create_default_admin():
    """创建默认管理员账号"""
    await init_db()

    async with get_session_factory()() as db:
        service = AccountService.with_session(db)

        existing_admins = await service.list_accounts(role=AccountRole.SUPER_ADMIN)
        if existing_admins:
            print("管理员账号已存在,无需初始化")
            return

        account = await service.register(
            AccountRegisterInput(
                username=DEFAULT_USERNAME,
                password=DEFAULT_PASSWORD,
                email=DEFAULT_EMAIL,
                nickname="超级管理员",
            )
        )
        await service.assign_role(account.id, AccountRole.SUPER_ADMIN)
        await service.verify_email(account.id)
        await db.commit()

        print("=" * 50)
        print("默认管理员账号创建成功!")
        print("=" * 50)
        print(f"用户名: {DEFAULT_USERNAME}")
        print(f"密码: {DEFAULT_PASSWORD}")
        print("=" * 50)
        print("请登录后立即修改密码!")
        print("=" * 50)


if __name__ == "__main__":
    asyncio.run(create_default_admin())
