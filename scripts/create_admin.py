# scripts/create_admin.py

import asyncio
from typing import Optional

import typer

from app.core.database import AsyncSessionLocal
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import UserRole

cli = typer.Typer()


async def create_admin_user(user_in: usr_schemas.UserCreate) -> bool:
    """
    관리자 사용자를 생성합니다. 로그인 ID 또는 이메일이 이미 있으면 False를 반환합니다.
    """
    async with AsyncSessionLocal() as db:
        if await usr_crud.user.get_by_login_id(db, login_id=user_in.login_id):
            typer.echo(f"오류: 이미 존재하는 로그인 ID입니다: {user_in.login_id}")
            return False
        if user_in.email and await usr_crud.user.get_by_email(db, email=user_in.email):
            typer.echo(f"오류: 이미 존재하는 이메일입니다: {user_in.email}")
            return False

        await usr_crud.user.create(db, obj_in=user_in)
    typer.echo(f"관리자 계정이 생성되었습니다: {user_in.login_id}")
    return True


@cli.command()
def main(
    login_id: str = typer.Option(
        ..., '--login-id', '-u',
        prompt="관리자 로그인 ID를 입력하세요",
        help="로그인 시 사용할 ID입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="최소 8자 이상."
    ),
    email: Optional[str] = typer.Option(None, '--email', '-e', help="관리자 이메일 (선택)"),
    full_name: str = typer.Option("Admin", '--name', '-n', help="관리자 이름"),
):
    """
    백오피스 ADMIN 계정을 생성합니다.
    """
    if len(password) < 8:
        typer.echo("오류: 비밀번호는 최소 8자 이상이어야 합니다.")
        raise typer.Abort()

    user_data = usr_schemas.UserCreate(
        login_id=login_id,
        email=email,
        password=password,
        full_name=full_name,
        role=UserRole.ADMIN,
    )
    if not asyncio.run(create_admin_user(user_data)):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
