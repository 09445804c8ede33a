from asnlex.cli import cli

cli()
