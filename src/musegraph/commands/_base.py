"""Click classes shared by the musegraph command tree.

Commands and groups take an ``examples`` string shown by an eager
``--examples`` flag, so ``--help`` stays short while invocations against a
real catalogue are one flag away.
"""

from __future__ import annotations

from typing import Any

import click

from musegraph.domain.types import NodeKind


class _ExamplesMixin:
    """Adds the ``--examples`` flag when an ``examples`` string is given."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples.rstrip() if examples else None

    def _echo_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value and self.examples:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)

    def get_params(self, ctx: click.Context) -> list[click.Parameter]:
        params: list[click.Parameter] = super().get_params(ctx)  # type: ignore[misc]
        if self.examples:
            params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._echo_examples,
                    help="Show example invocations and exit.",
                )
            )
        return params


class MuseCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class MuseGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`MuseCommand` by default."""

    command_class = MuseCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


# ``--kind`` accepts the node kinds by value.
KIND_CHOICE = click.Choice([kind.value for kind in NodeKind], case_sensitive=False)
