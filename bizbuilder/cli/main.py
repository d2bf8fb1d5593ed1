"""bizbuilder CLI entry point — `bizb` command group."""

from __future__ import annotations

import asyncio

import click

from bizbuilder.cli.output import console, plans_table


@click.group()
@click.version_option(package_name="bizbuilder")
@click.option(
    "--api-url",
    default="http://localhost:5000",
    envvar="BIZB_API_URL",
    show_default=True,
    help="Base URL of the bizbuilder API server",
)
@click.pass_context
def cli(ctx: click.Context, api_url: str) -> None:
    """bizbuilder — website builder, CRM and accounts API.

    \b
    Quick start:
      bizb db init
      bizb serve --reload
      bizb plans list

    API docs: http://localhost:5000/docs
    """
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url.rstrip("/")


@cli.command("serve")
@click.option("--host", default=None, help="Bind host (default: APP_HOST)")
@click.option("--port", default=None, type=int, help="Bind port (default: APP_PORT)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload (dev mode)")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    from bizbuilder.core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "bizbuilder.api.app:create_app",
        factory=True,
        host=host or settings.app_host,
        port=port or settings.app_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.group("db")
def db_cmd() -> None:
    """Database maintenance."""


@db_cmd.command("init")
def db_init() -> None:
    """Create all tables and seed the plan catalog (use Alembic in production)."""
    from bizbuilder.core.database import close_engine, create_all, get_session_factory
    from bizbuilder.core.plans import seed_plans

    async def _run() -> int:
        try:
            await create_all()
            async with get_session_factory()() as session:
                added = await seed_plans(session)
                await session.commit()
            return added
        finally:
            await close_engine()

    added = asyncio.run(_run())
    console.print(f"[green]Database ready.[/green] {added} plan(s) seeded.")


@cli.group("plans")
def plans_cmd() -> None:
    """Inspect the subscription plan catalog."""


@plans_cmd.command("list")
@click.option("--local", is_flag=True, default=False, help="Show the built-in catalog, no API call")
@click.pass_context
def plans_list(ctx: click.Context, local: bool) -> None:
    """List subscription plans."""
    if local:
        from bizbuilder.core.plans import PLANS

        console.print(plans_table([dict(p) for p in PLANS]))
        return

    import httpx

    api_url: str = ctx.obj["api_url"]
    try:
        r = httpx.get(f"{api_url}/api/plans", timeout=10)
        r.raise_for_status()
        console.print(plans_table(r.json()["data"]["items"]))
    except httpx.ConnectError:
        console.print(f"[red]Cannot connect to API at {api_url}.[/red]")
        raise SystemExit(1)
    except httpx.HTTPStatusError as e:
        console.print(f"[red]Error {e.response.status_code}:[/red] {e.response.text}")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
