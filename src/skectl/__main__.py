from skectl.cli.main import cli

cli()
