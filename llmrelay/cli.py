import typer
from rich.console import Console
from rich.table import Table

from llmrelay.config import settings
from llmrelay.core.exceptions import RelayError
from llmrelay.core.security import mask_api_key
from llmrelay.core.store import JsonFileStore
from llmrelay.schemas.credentials import CredentialCreate
from llmrelay.schemas.users import UserCreate

console = Console()
cli_app = typer.Typer(name="relay-admin", help="LLM relay administrative CLI")


def _open_store(data_dir: str | None) -> JsonFileStore:
    store = JsonFileStore(data_dir or settings.relay_data_dir)
    store.init_directories()
    return store


def _fail(exc: RelayError) -> None:
    console.print(f"[bold red]{exc.code}:[/bold red] {exc.message}")
    raise typer.Exit(code=1)


DataDirOption = typer.Option(None, "--data-dir", help="Record store directory (default: RELAY_DATA_DIR)")


@cli_app.command("seed-providers")
def seed_providers(data_dir: str = DataDirOption):
    """Register the built-in provider templates that are not yet present."""
    from llmrelay.services.dispatch.defaults import seed_default_providers

    added = seed_default_providers(_open_store(data_dir))
    if added:
        console.print(f"[bold green]Seeded providers:[/bold green] {', '.join(added)}")
    else:
        console.print("[dim]All default providers already registered.[/dim]")


@cli_app.command("list-providers")
def list_providers(data_dir: str = DataDirOption):
    """List registered provider templates."""
    from llmrelay.services.providers import ProviderCatalog

    providers = ProviderCatalog(_open_store(data_dir)).list_providers()
    if not providers:
        console.print("[dim]No providers registered.[/dim]")
        return

    table = Table(title="Providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Endpoint")
    table.add_column("Models")
    for provider in providers:
        table.add_row(provider.id, provider.name, provider.endpoint or "—", ", ".join(provider.models))
    console.print(table)


@cli_app.command("create-user")
def create_user(
    username: str = typer.Option(..., "--username"),
    email: str = typer.Option(..., "--email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, confirmation_prompt=True),
    data_dir: str = DataDirOption,
):
    """Create a user account."""
    from pydantic import ValidationError as PydanticValidationError

    from llmrelay.services.users import UserService

    try:
        data = UserCreate(username=username, email=email, password=password)
    except PydanticValidationError as e:
        for err in e.errors():
            console.print(f"[red]{'.'.join(str(p) for p in err['loc'])}: {err['msg']}[/red]")
        raise typer.Exit(code=1)

    try:
        user = UserService(_open_store(data_dir)).create_user(data)
    except RelayError as e:
        _fail(e)

    console.print(f"\n[bold green]User created.[/bold green]")
    console.print(f"  Username: {user.username}")
    console.print(f"  User ID:  {user.id}\n")


@cli_app.command("add-credential")
def add_credential(
    user_id: str = typer.Option(..., "--user-id"),
    provider: str = typer.Option(..., "--provider", help="Provider name, e.g. openai"),
    api_key: str = typer.Option(..., "--api-key", prompt=True, hide_input=True),
    data_dir: str = DataDirOption,
):
    """Store a user's API key for a provider."""
    from llmrelay.services.credentials import CredentialService
    from llmrelay.services.providers import ProviderCatalog

    store = _open_store(data_dir)
    template = ProviderCatalog(store).find_by_name(provider)
    if template is None:
        console.print(f"[yellow]No provider named '{provider}'.[/yellow]")
        raise typer.Exit(code=1)

    try:
        credential = CredentialService(store).create_credential(
            CredentialCreate(user_id=user_id, provider_id=template.id, api_key=api_key)
        )
    except RelayError as e:
        _fail(e)

    console.print(f"[bold green]Credential stored[/bold green] for {provider}: {mask_api_key(credential.api_key)}")


def main():
    cli_app()


if __name__ == "__main__":
    main()
