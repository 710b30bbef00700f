from shakegate.main import cli

cli()
