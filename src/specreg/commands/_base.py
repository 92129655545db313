"""Custom Click base classes with --examples support.

Provides SpecCommand and SpecGroup that accept an ``examples`` parameter.
When ``--examples`` is passed, the command prints usage examples and exits.
A SpecGroup given no examples of its own shows the first example of each
subcommand, so ``specreg show --examples`` stays in step with the
``show`` subcommands.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click


def _add_examples_option(
    cmd: click.Command, format_examples: Callable[[click.Context], str]
) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(format_examples(ctx))
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class SpecCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, self.format_examples)

    def format_examples(self, ctx: click.Context) -> str:
        return self.examples or ""


class SpecGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = SpecCommand`` so all subcommands accept the
    ``examples`` parameter without an explicit ``cls=``. The flag is
    always present on a group; see :meth:`format_examples`.
    """

    command_class = SpecCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        _add_examples_option(self, self.format_examples)

    def format_examples(self, ctx: click.Context) -> str:
        """Own examples, else the first example of each subcommand in listing order."""
        if self.examples:
            return self.examples
        lines: list[str] = []
        for name in self.list_commands(ctx):
            examples = getattr(self.get_command(ctx, name), "examples", None)
            if examples:
                lines.append(examples.splitlines()[0])
        return "\n".join(lines)
