from musegraph.cli import cli

cli()
