from vaultpress.cli import app

app()
