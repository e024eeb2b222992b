"""CLI entrypoint for trying out ui-extras click dispatch."""

from __future__ import annotations

from dataclasses import asdict, dataclass

import typer
from rich import print

from ui_extras.components import Interaction, UiDisabled, press, release
from ui_extras.config import settings
from ui_extras.console import ConsoleCommands
from ui_extras.ecs import App, Commands, Entity, World
from ui_extras.onclick import OnClick
from ui_extras.plugin import UiExtrasPlugin
from ui_extras.telemetry import configure_logging

app = typer.Typer(help="ui-extras click dispatch playground")


@dataclass(slots=True)
class ClickStats:
    clicks: int = 0
    last_clicked: str | None = None


@dataclass(frozen=True, slots=True)
class Label:
    text: str


def _count_click(world: World) -> None:
    world.resource(ClickStats).clicks += 1


def _remember_button(entity: Entity, world: World) -> None:
    world.resource(ClickStats).last_clicked = str(entity)


def _echo(args: list[str]) -> None:
    print(" ".join(args))


def _spawn_labels(args: list[str], commands: Commands) -> None:
    for text in args or ["label"]:
        commands.spawn(Label(text))


def _count_labels(world: World) -> None:
    print({"labels": sum(1 for _ in world.query(Label))})


def _build_demo_app() -> tuple[App, Entity]:
    game = App().add_plugins(UiExtrasPlugin(settings))
    game.world.insert_resource(ClickStats())
    console = game.world.get_resource(ConsoleCommands)
    if console is not None:
        console.register("echo", _echo).register("spawn", _spawn_labels).register("count", _count_labels)

    on_click = OnClick().system(_count_click).entity_system(_remember_button)
    if console is not None:
        on_click.cli("spawn clicked")
    button = game.world.spawn(Interaction.NONE, on_click)
    return game, button


@app.command("settings")
def show_settings() -> None:
    """Show effective runtime configuration."""
    print(settings.model_dump())


@app.command()
def demo(
    clicks: int = typer.Option(3, min=0, help="How many presses to simulate"),
    disabled: bool = typer.Option(False, help="Mark the button UiDisabled before clicking"),
) -> None:
    """Press a demo button several times and report what its behaviors did."""
    configure_logging(settings.log_level)
    game, button = _build_demo_app()
    if disabled:
        game.world.insert(button, UiDisabled())

    for _ in range(clicks):
        press(game.world, button)
        game.update()
        release(game.world, button)
        game.update()

    stats = game.world.resource(ClickStats)
    print(
        {
            "clicks": stats.clicks,
            "last_clicked": stats.last_clicked,
            "labels": sum(1 for _ in game.world.query(Label)),
            "queued_actions": len(game.world.get(button, OnClick)),
        }
    )


@app.command()
def console(line: str) -> None:
    """Run one console command against the demo world."""
    configure_logging(settings.log_level)
    game, _ = _build_demo_app()
    interpreter = game.world.get_resource(ConsoleCommands)
    if interpreter is None:
        print({"error": "Console is disabled. Set UI_EXTRAS_CLI_ENABLED=true to enable it."})
        raise typer.Exit(code=1)

    job = interpreter.run(game.world, line)
    if job is None:
        print({"error": "Empty command line"})
        raise typer.Exit(code=1)
    payload = asdict(job)
    payload["status"] = job.status.value
    payload["submitted_at"] = job.submitted_at.isoformat()
    print(payload)
    if job.error:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
