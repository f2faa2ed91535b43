"""Typer CLI application over a stored editing session."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

try:
    import typer
    from rich.console import Console
    from rich.live import Live
    from rich.table import Table
    from rich.text import Text
    HAS_TYPER = True
except ImportError:
    HAS_TYPER = False

from char_grid.commands import (
    ClearGrid,
    ClearSelection,
    Command,
    CommandResult,
    CreateBranch,
    DeleteBranch,
    DeleteSnapshot,
    FillSelection,
    LoadSnapshot,
    PointerDown,
    PointerUp,
    Paste,
    Resize,
    SaveSnapshot,
    SelectRectangle,
    SwitchBranch,
    apply,
)
from char_grid.config import get_settings
from char_grid.errors import CharGridError, StoreError
from char_grid.io.store import SessionStore
from char_grid.logging_config import setup_logging
from char_grid.playback.scheduler import AsyncioScheduler
from char_grid.render.text import TextRenderer
from char_grid.session import EditorSession


def create_app() -> "typer.Typer":
    """Create and configure the CLI application."""
    if not HAS_TYPER:
        raise ImportError("typer and rich are required for CLI. Install with: pip install char-grid[cli]")

    app = typer.Typer(
        name="char-grid",
        help="Edit, snapshot, branch and replay character-grid art.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    branch_app = typer.Typer(help="Create, switch and delete branches.", no_args_is_help=True)
    app.add_typer(branch_app, name="branch")

    console = Console()
    err_console = Console(stderr=True)
    renderer = TextRenderer()
    state: dict[str, SessionStore] = {}

    def store() -> SessionStore:
        return state["store"]

    def open_session(scheduler: AsyncioScheduler | None = None) -> EditorSession:
        settings = get_settings()
        try:
            return store().load(
                rows=settings.default_rows,
                cols=settings.default_cols,
                history_limit=settings.history_limit,
                interval_ms=settings.playback_interval_ms,
                loop=settings.playback_loop,
                scheduler=scheduler,
            )
        except StoreError as exc:
            err_console.print(f"[red]{exc}[/]")
            raise typer.Exit(1)

    def run(session: EditorSession, *commands: Command) -> CommandResult:
        """Apply commands in order, stopping at the first rejection."""
        result = CommandResult()
        for command in commands:
            result = apply(session, command)
            if not result.ok:
                err_console.print(f"[red]{result.error}[/]")
                raise typer.Exit(1)
        return result

    def commit(session: EditorSession) -> None:
        store().save(session)

    def check_cell(session: EditorSession, row: int, col: int, hint: str) -> None:
        """Reject coordinates outside the stored grid before they reach the engine."""
        if not session.grid.in_bounds(row, col):
            raise typer.BadParameter(
                f"({row}, {col}) is outside the {session.rows}x{session.cols} grid",
                param_hint=hint,
            )

    @app.callback()
    def main(
        store_path: Annotated[Optional[Path], typer.Option("--store", "-s", help="Session file")] = None,
        verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    ) -> None:
        """Edit, snapshot, branch and replay character-grid art."""
        settings = get_settings()
        setup_logging("DEBUG" if verbose else settings.log_level, settings.log_file)
        state["store"] = SessionStore(store_path or settings.store_path)

    # -------------------------------------------------------------------------
    # Grid
    # -------------------------------------------------------------------------

    @app.command()
    def new(
        rows: Annotated[Optional[int], typer.Option("--rows", "-r", help="Grid rows")] = None,
        cols: Annotated[Optional[int], typer.Option("--cols", "-c", help="Grid columns")] = None,
        force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing session")] = False,
    ) -> None:
        """Start a fresh session with a blank grid and an empty main branch."""
        settings = get_settings()
        if store().exists() and not force:
            err_console.print(f"[yellow]{store().path} exists; use --force to overwrite[/]")
            raise typer.Exit(1)
        session = EditorSession.from_settings(settings)
        run(session, Resize(rows or settings.default_rows, cols or settings.default_cols))
        commit(session)
        console.print(f"[green]Created {session.rows}x{session.cols} grid in {store().path}[/]")

    @app.command()
    def resize(
        rows: Annotated[int, typer.Argument(help="New row count")],
        cols: Annotated[int, typer.Argument(help="New column count")],
    ) -> None:
        """Replace the grid with a blank one of a new size."""
        session = open_session()
        run(session, Resize(rows, cols))
        commit(session)
        console.print(f"[green]Grid is now {rows}x{cols}[/]")

    @app.command()
    def show(
        index: Annotated[Optional[int], typer.Option("--index", "-i", help="Show a snapshot of the active branch")] = None,
        preview: Annotated[bool, typer.Option("--preview", "-p", help="Newline after every row")] = False,
    ) -> None:
        """Print the grid (or a snapshot) as plain text."""
        session = open_session()
        grid = session.grid
        if index is not None:
            try:
                grid = session.branches.get(index).to_grid()
            except CharGridError as exc:
                err_console.print(f"[red]{exc}[/]")
                raise typer.Exit(1)
        output = renderer.preview(grid) if preview else renderer.render(grid)
        console.print(Text(output), end="" if preview else "\n", soft_wrap=True)

    @app.command("type")
    def type_text(
        text: Annotated[str, typer.Argument(help="Text to paste; \\n starts a new line")],
        row: Annotated[int, typer.Option("--row", "-r", help="Start row")] = 0,
        col: Annotated[int, typer.Option("--col", "-c", help="Start column")] = 0,
    ) -> None:
        """Paste text into the grid starting at a cell."""
        session = open_session()
        check_cell(session, row, col, "--row/--col")
        run(
            session,
            PointerDown(row, col),
            PointerUp(),
            ClearSelection(),
            Paste(text.replace("\\n", "\n")),
        )
        commit(session)

    @app.command()
    def fill(
        char: Annotated[str, typer.Argument(help="Fill character")],
        r1: Annotated[int, typer.Argument()],
        c1: Annotated[int, typer.Argument()],
        r2: Annotated[int, typer.Argument()],
        c2: Annotated[int, typer.Argument()],
    ) -> None:
        """Fill the rectangle between two corners with one character."""
        session = open_session()
        check_cell(session, r1, c1, "R1 C1")
        check_cell(session, r2, c2, "R2 C2")
        run(session, SelectRectangle(r1, c1, r2, c2), FillSelection(char))
        commit(session)

    @app.command()
    def clear() -> None:
        """Blank the whole grid."""
        session = open_session()
        run(session, ClearGrid())
        commit(session)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @app.command()
    def snapshot() -> None:
        """Save the current grid as a snapshot on the active branch."""
        session = open_session()
        result = run(session, SaveSnapshot())
        commit(session)
        console.print(f"[green]Saved snapshot {result.value} on {session.branches.active}[/]")

    @app.command()
    def load(
        index: Annotated[int, typer.Argument(help="Snapshot index on the active branch")],
    ) -> None:
        """Load a snapshot into the grid."""
        session = open_session()
        run(session, LoadSnapshot(index))
        commit(session)

    @app.command()
    def drop(
        index: Annotated[int, typer.Argument(help="Snapshot index on the active branch")],
    ) -> None:
        """Delete a snapshot from the active branch."""
        session = open_session()
        run(session, DeleteSnapshot(index))
        commit(session)

    @app.command()
    def info() -> None:
        """List branches and the snapshots of the active branch."""
        session = open_session()

        console.print(f"[bold cyan]{store().path}[/]  grid {session.rows}x{session.cols}")
        table = Table(title="Branches")
        table.add_column("Name")
        table.add_column("Snapshots", justify="right")
        for name in session.branches.names():
            marker = "[bold green]* [/]" if name == session.branches.active else "  "
            table.add_row(f"{marker}{name}", str(session.branches.count(name)))
        console.print(table)

        snapshots = session.snapshots()
        if snapshots:
            shots = Table(title=f"Snapshots on {session.branches.active}")
            shots.add_column("#", justify="right")
            shots.add_column("Size")
            shots.add_column("Saved")
            for i, shot in enumerate(snapshots):
                shots.add_row(str(i), f"{shot.rows}x{shot.cols}", shot.timestamp.strftime("%Y-%m-%d %H:%M:%S"))
            console.print(shots)

    @app.command()
    def thumbnail(
        index: Annotated[int, typer.Argument(help="Snapshot index on the active branch")],
        dest: Annotated[Path, typer.Argument(help="Image file to write (e.g. shot.png)")],
        width: Annotated[int, typer.Option("--width", "-w", help="Image width in pixels")] = 250,
    ) -> None:
        """Write a small raster preview of a snapshot."""
        from char_grid.render.preview import save_thumbnail

        session = open_session()
        try:
            shot = session.branches.get(index)
        except CharGridError as exc:
            err_console.print(f"[red]{exc}[/]")
            raise typer.Exit(1)
        try:
            save_thumbnail(shot, dest, width)
        except ImportError as exc:
            err_console.print(f"[red]{exc}[/]")
            raise typer.Exit(1)
        console.print(f"[green]Wrote {dest}[/]")

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    @branch_app.command("create")
    def branch_create(
        name: Annotated[Optional[str], typer.Argument(help="Branch name (default: branch-N)")] = None,
    ) -> None:
        """Create a branch and make it active."""
        session = open_session()
        branch_name = name if name is not None else session.branches.next_default_name()
        run(session, CreateBranch(branch_name))
        commit(session)
        console.print(f"[green]Created branch {branch_name}[/]")

    @branch_app.command("switch")
    def branch_switch(name: Annotated[str, typer.Argument(help="Branch name")]) -> None:
        """Make another branch active."""
        session = open_session()
        run(session, SwitchBranch(name))
        commit(session)

    @branch_app.command("delete")
    def branch_delete(name: Annotated[str, typer.Argument(help="Branch name")]) -> None:
        """Delete a branch (main cannot be deleted)."""
        session = open_session()
        run(session, DeleteBranch(name))
        commit(session)
        console.print(f"[green]Deleted branch {name}[/]")

    # -------------------------------------------------------------------------
    # Playback
    # -------------------------------------------------------------------------

    @app.command()
    def play(
        interval: Annotated[Optional[int], typer.Option("--interval", "-i", help="Milliseconds per frame")] = None,
        loop: Annotated[Optional[bool], typer.Option("--loop/--no-loop", "-l", help="Repeat until interrupted (default from settings)")] = None,
    ) -> None:
        """Replay the active branch's snapshots in the terminal.

        Playback is view-only here: the stored session is not modified.
        """

        async def replay() -> None:
            session = open_session(scheduler=AsyncioScheduler())
            if interval is not None:
                session.playback.interval_ms = interval
            if loop is not None:
                session.playback.loop = loop

            with Live(Text(""), console=console, auto_refresh=False) as live:
                session.add_listener(lambda s: live.update(Text(renderer.render(s.grid)), refresh=True))
                if not session.playback.start():
                    err_console.print(f"[yellow]No snapshots on {session.branches.active}[/]")
                    return
                try:
                    while session.playback.is_playing:
                        await asyncio.sleep(0.05)
                finally:
                    session.playback.stop()

        try:
            asyncio.run(replay())
        except KeyboardInterrupt:
            console.print("[dim]stopped[/]")

    return app
